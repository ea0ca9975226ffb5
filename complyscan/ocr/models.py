from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrPage:
    """Text detected on one image plus the backend's per-block confidences."""

    text: str
    block_confidences: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class OCRResult:
    """Output of the text extractor. Transient, never persisted directly."""

    text: str
    confidence: float
    page_count: int
    mime_type: str = ""

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass(frozen=True)
class SourceFile:
    """Raw bytes of an uploaded or downloaded document with its MIME type."""

    data: bytes
    mime_type: str

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"
