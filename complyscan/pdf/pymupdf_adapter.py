import pymupdf

from complyscan.pdf.base import BasePageRenderer, BasePdfExtractor
from complyscan.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads the text layer of a PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not open PDF: {exc}") from exc


class PyMuPdfRenderer(BasePageRenderer):
    """Rasterizes pages to PNG pixmaps with PyMuPDF."""

    name = "pymupdf"

    def render(self, pdf_bytes: bytes, page_number: int, scale: float) -> bytes | None:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            if doc.page_count == 0:
                return None
            index = min(max(page_number, 1), doc.page_count) - 1
            pixmap = doc[index].get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
            return pixmap.tobytes("png") or None
