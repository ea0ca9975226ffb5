from complyscan.config.settings import Settings
from complyscan.ocr.client_base import BaseOcrClient
from complyscan.ocr.extractor import TextExtractor
from complyscan.ocr.google_vision_adapter import GoogleVisionAdapter
from complyscan.ocr.openai_vision_adapter import OpenAIVisionAdapter
from complyscan.ocr.sources import RemoteFileFetcher
from complyscan.pdf.factory import PdfExtractorFactory
from complyscan.pdf.pdfplumber_adapter import PdfPlumberAdapter
from complyscan.pdf.pymupdf_adapter import PyMuPdfAdapter


class TextExtractorFactory:
    """Creates the configured OCR client and wires up the text extractor."""

    PROVIDERS = ("google_vision", "openai")

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        return TextExtractor(
            ocr_client=cls.create_client(settings),
            rasterizer=PdfExtractorFactory.create_rasterizer(settings),
            page_counters=(PyMuPdfAdapter(), PdfPlumberAdapter()),
            text_layer=(
                PdfExtractorFactory.create(settings) if settings.pdf_text_layer_first else None
            ),
            fetcher=RemoteFileFetcher(
                timeout_seconds=settings.remote_file_timeout_seconds,
                max_bytes=settings.max_upload_bytes,
            ),
            max_pages=settings.pdf_max_pages,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "google_vision":
            return GoogleVisionAdapter()
        if provider == "openai":
            return OpenAIVisionAdapter(
                api_key=settings.ocr_openai_api_key,
                model=settings.ocr_openai_model_name,
                timeout_seconds=settings.ocr_openai_timeout_seconds,
            )
        raise ValueError(f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}")
