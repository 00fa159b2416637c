import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docconvert.core.config import settings
from docconvert.core.errors import DocumentServiceError, ValidationError
from docconvert.core.logging import configure_logging
from docconvert.api import endpoints
from docconvert.api.uploads import get_storage
from docconvert.schemas.pdf import HealthResponse

logger = logging.getLogger(__name__)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(DocumentServiceError)
async def document_service_error_handler(request: Request, exc: DocumentServiceError):
    level = logging.WARNING if isinstance(exc, ValidationError) else logging.ERROR
    logger.log(
        level, "%s %s failed at %s: %s (%s)",
        request.method, request.url.path, exc.stage, exc.message, exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    error = ValidationError(
        f"Invalid request: {problems}",
        stage=request.url.path.rsplit("/", 1)[-1],
        detail=str(exc.errors()),
    )
    return await document_service_error_handler(request, error)

# Health check
@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", version=settings.VERSION)

app.include_router(endpoints.router, prefix=settings.API_PREFIX)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    get_storage()
    logger.info("Server running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
