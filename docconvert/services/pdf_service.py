from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from io import BytesIO
import img2pdf
import logging
from PIL import Image
from typing import Iterable, List, Optional, Tuple

from docconvert.core.errors import ProcessingError
from docconvert.services.page_ranges import select_pages

logger = logging.getLogger(__name__)

JPEG_TYPES = {"image/jpeg", "image/jpg", "image/pjpeg"}
PNG_TYPES = {"image/png", "image/x-png"}
SUPPORTED_IMAGE_TYPES = JPEG_TYPES | PNG_TYPES

# One image pixel becomes one PDF point.
PIXEL_LAYOUT = img2pdf.get_fixed_dpi_layout_fun((72, 72))


def normalize_mime_type(mime_type: Optional[str]) -> str:
    return (mime_type or "").split(";", 1)[0].strip().lower()


class PDFService:
    @staticmethod
    def load_pdf(pdf_content: bytes, stage: str) -> PdfReader:
        """Parse a source document, failing before any page is emitted."""
        try:
            reader = PdfReader(BytesIO(pdf_content))
            # force the page tree to be read
            len(reader.pages)
        except (PyPdfError, ValueError, KeyError, TypeError) as exc:
            raise ProcessingError("Invalid PDF document", stage=stage, detail=str(exc)) from exc
        return reader

    @staticmethod
    def assemble_pdf(pages: Iterable[PageObject], stage: str) -> bytes:
        """Copy ``pages`` into a new document and serialize it.

        A page that cannot be copied fails the whole document.
        """
        writer = PdfWriter()
        output = BytesIO()
        try:
            for page in pages:
                writer.add_page(page)
            writer.write(output)
        except (PyPdfError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ProcessingError("Failed to assemble PDF document", stage=stage, detail=str(exc)) from exc
        logger.debug("Assembled %d pages for %s", len(writer.pages), stage)
        return output.getvalue()

    @staticmethod
    def merge_pdfs(pdf_files: List[bytes]) -> bytes:
        """Merge multiple PDF files into one, keeping document and page order."""
        readers = [PDFService.load_pdf(content, "merge") for content in pdf_files]
        logger.info(
            "Merging %d documents with %d pages", len(readers), sum(len(r.pages) for r in readers)
        )
        return PDFService.assemble_pdf(
            (page for reader in readers for page in reader.pages), "merge"
        )

    @staticmethod
    def extract_pages(reader: PdfReader, selection: Iterable[int]) -> bytes:
        """Copy the pages at ``selection`` into a new document, in selection order."""
        return PDFService.assemble_pdf((reader.pages[index] for index in selection), "split")

    @staticmethod
    def split_pdf(pdf_content: bytes, page_range: Optional[str]) -> bytes:
        reader = PDFService.load_pdf(pdf_content, "split")
        selection = select_pages(page_range, len(reader.pages))
        logger.info(
            "Extracting %d of %d pages for range %r", len(selection), len(reader.pages), page_range
        )
        return PDFService.extract_pages(reader, selection)

    @staticmethod
    def image_to_page(image_content: bytes) -> bytes:
        """Single-page PDF whose page size equals the image's pixel size.

        EXIF orientation is ignored; the page keeps the stored pixel layout.
        """
        try:
            with Image.open(BytesIO(image_content)) as img:
                img.load()
                width, height = img.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ProcessingError("Invalid image", stage="images", detail=str(exc)) from exc

        try:
            page = img2pdf.convert(
                image_content, layout_fun=PIXEL_LAYOUT, rotation=img2pdf.Rotation.none
            )
        except Exception as exc:
            raise ProcessingError("Failed to embed image", stage="images", detail=str(exc)) from exc
        logger.debug("Built %dx%d page from image", width, height)
        return page

    @staticmethod
    def images_to_pdf(images: List[Tuple[bytes, Optional[str]]]) -> bytes:
        """Build one document with a page per supported image.

        Unsupported declared types are skipped. A supported image that fails
        to decode fails the whole batch.
        """
        pages = []
        for position, (image_content, mime_type) in enumerate(images):
            if normalize_mime_type(mime_type) not in SUPPORTED_IMAGE_TYPES:
                logger.info("Skipping image %d with unsupported type %r", position, mime_type)
                continue
            page_pdf = PDFService.image_to_page(image_content)
            pages.extend(PdfReader(BytesIO(page_pdf)).pages)

        return PDFService.assemble_pdf(pages, "images")

pdf_service = PDFService()
