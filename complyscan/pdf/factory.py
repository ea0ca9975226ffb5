from complyscan.config.settings import Settings
from complyscan.pdf.base import BasePdfExtractor
from complyscan.pdf.pdfplumber_adapter import PdfPlumberAdapter
from complyscan.pdf.pymupdf_adapter import PyMuPdfAdapter
from complyscan.pdf.rasterizer import PdfRasterizer


class PdfExtractorFactory:
    """Creates the configured PDF text-layer extractor and the page rasterizer."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create_rasterizer(cls, settings: Settings) -> PdfRasterizer:
        return PdfRasterizer(pause_seconds=settings.raster_pause_seconds)
