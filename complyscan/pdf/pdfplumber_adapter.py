import io

import pdfplumber

from complyscan.pdf.base import BasePageRenderer, BasePdfExtractor
from complyscan.pdf.exceptions import PdfExtractionError

_POINTS_PER_INCH = 72


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the text layer of a PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not open PDF: {exc}") from exc


class PdfPlumberRenderer(BasePageRenderer):
    """Rasterizes pages through pdfplumber's pypdfium2-backed page images."""

    name = "pdfplumber"

    def render(self, pdf_bytes: bytes, page_number: int, scale: float) -> bytes | None:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            if not pdf.pages:
                return None
            index = min(max(page_number, 1), len(pdf.pages)) - 1
            image = pdf.pages[index].to_image(resolution=int(_POINTS_PER_INCH * scale))
            buf = io.BytesIO()
            image.original.save(buf, format="PNG")
        return buf.getvalue() or None
