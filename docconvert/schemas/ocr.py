from pydantic import BaseModel

class OCRResponse(BaseModel):
    success: bool = True
    text: str
