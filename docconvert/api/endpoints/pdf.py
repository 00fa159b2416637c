import asyncio

from fastapi import APIRouter, Depends, UploadFile, File as FileParam, Form, Response
from typing import List, Optional
from urllib.parse import quote

from docconvert.api.uploads import get_storage, persist_upload, persist_uploads
from docconvert.core.config import settings
from docconvert.core.errors import ValidationError
from docconvert.services.pdf_service import pdf_service
from docconvert.services.storage_service import TransientFiles, TransientStorage

router = APIRouter(tags=["PDF Manipulation"])

PDF_MEDIA_TYPE = "application/pdf"


def pdf_response(content: bytes, filename: str) -> Response:
    filename = filename.replace('"', "").replace("\r", "").replace("\n", "")
    if filename.isascii():
        disposition = f'attachment; filename="{filename}"'
    else:
        disposition = f"attachment; filename*=UTF-8''{quote(filename)}"
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": disposition},
    )


@router.post("/merge", response_class=Response)
async def merge_pdfs(
    files: Optional[List[UploadFile]] = FileParam(None),
    storage: TransientStorage = Depends(get_storage),
):
    with TransientFiles(storage) as transient:
        blobs = await persist_uploads(files, transient, "merge", settings.MAX_MERGE_FILES)
        if len(blobs) < 2:
            raise ValidationError("Please upload at least 2 PDF files.", stage="merge")

        merged_pdf = await asyncio.to_thread(
            pdf_service.merge_pdfs, [transient.read(blob) for blob in blobs]
        )

    return pdf_response(merged_pdf, "merged_document.pdf")


@router.post("/split", response_class=Response)
async def split_pdf(
    file: Optional[UploadFile] = FileParam(None),
    page_range: Optional[str] = Form(None, alias="range"),
    storage: TransientStorage = Depends(get_storage),
):
    with TransientFiles(storage) as transient:
        if file is None:
            raise ValidationError("No file uploaded.", stage="split")
        blob = await persist_upload(file, transient, "split")

        split = await asyncio.to_thread(pdf_service.split_pdf, transient.read(blob), page_range)

    return pdf_response(split, f"split_{blob.original_name}")


@router.post("/jpg-to-pdf", response_class=Response)
async def images_to_pdf(
    files: Optional[List[UploadFile]] = FileParam(None),
    storage: TransientStorage = Depends(get_storage),
):
    with TransientFiles(storage) as transient:
        blobs = await persist_uploads(files, transient, "images", settings.MAX_IMAGE_FILES)
        if not blobs:
            raise ValidationError("No images uploaded.", stage="images")

        pdf_content = await asyncio.to_thread(
            pdf_service.images_to_pdf,
            [(transient.read(blob), blob.mime_type) for blob in blobs],
        )

    return pdf_response(pdf_content, "images_converted.pdf")
