import logging
from io import BytesIO
from typing import Optional

import pytesseract
from PIL import Image

from docconvert.core.config import settings
from docconvert.core.errors import ConfigurationError, ProcessingError

logger = logging.getLogger(__name__)

PDF_OCR_NOTICE = (
    "Backend Note: OCR on PDF documents requires rasterizing each page to an image "
    "first (e.g. with Poppler or Ghostscript), which this service does not provide. "
    "Please upload an image file to run text recognition."
)


class OCRService:
    @staticmethod
    def recognize(file_content: bytes, mime_type: Optional[str], language: Optional[str] = None) -> str:
        """Extract text from an image; other files get ``PDF_OCR_NOTICE``."""
        if not (mime_type or "").lower().startswith("image/"):
            logger.info("Skipping OCR for non-image upload of type %r", mime_type)
            return PDF_OCR_NOTICE

        try:
            img = Image.open(BytesIO(file_content))
            img.load()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ProcessingError("Invalid image", stage="ocr", detail=str(exc)) from exc

        try:
            return pytesseract.image_to_string(img, lang=language or settings.OCR_LANGUAGE)
        except pytesseract.TesseractNotFoundError as exc:
            raise ConfigurationError("Tesseract OCR engine is not installed", stage="ocr") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise ProcessingError("OCR failed", stage="ocr", detail=str(exc)) from exc
        finally:
            img.close()

ocr_service = OCRService()
