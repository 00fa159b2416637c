from pydantic import BaseModel
from typing import Optional

class ErrorResponse(BaseModel):
    error: str
    code: str
    stage: Optional[str] = None
    details: Optional[str] = None

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
