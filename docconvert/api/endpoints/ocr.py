import asyncio

from fastapi import APIRouter, Depends, UploadFile, File as FileParam
from typing import Optional

from docconvert.api.uploads import get_storage, persist_upload
from docconvert.core.errors import ValidationError
from docconvert.schemas.ocr import OCRResponse
from docconvert.services.ocr_service import ocr_service
from docconvert.services.storage_service import TransientFiles, TransientStorage

router = APIRouter(tags=["OCR"])

@router.post("/ocr", response_model=OCRResponse)
async def ocr_file(
    file: Optional[UploadFile] = FileParam(None),
    storage: TransientStorage = Depends(get_storage),
):
    with TransientFiles(storage) as transient:
        if file is None:
            raise ValidationError("No file uploaded.", stage="ocr")
        blob = await persist_upload(file, transient, "ocr")

        text = await asyncio.to_thread(ocr_service.recognize, transient.read(blob), blob.mime_type)

    return OCRResponse(success=True, text=text)
