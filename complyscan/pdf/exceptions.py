class PdfError(Exception):
    """Base exception for PDF handling."""


class PdfExtractionError(PdfError):
    """Raised when the embedded text layer cannot be read."""


class InvalidPdfDataUrlError(PdfError, ValueError):
    """Raised when a value is not a base64 ``data:application/pdf`` URL."""


class RasterizationError(PdfError):
    """Raised when every rasterization strategy failed for a page."""
