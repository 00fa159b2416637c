from pydantic import BaseModel, Field
from typing import Optional

class AIProcessRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    model: Optional[str] = Field(None, description="Overrides the configured default model")

class AIProcessResponse(BaseModel):
    text: str
