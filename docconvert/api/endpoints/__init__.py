from fastapi import APIRouter

from docconvert.schemas.pdf import ErrorResponse

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or insufficient inputs"},
    413: {"model": ErrorResponse, "description": "Upload exceeds size or count limits"},
    500: {"model": ErrorResponse, "description": "Input could not be processed"},
    503: {"model": ErrorResponse, "description": "External service not configured"},
}

router = APIRouter(responses=ERROR_RESPONSES)

from .pdf import router as pdf_router
router.include_router(pdf_router)

from .ocr import router as ocr_router
router.include_router(ocr_router)

from .ai import router as ai_router
router.include_router(ai_router)
