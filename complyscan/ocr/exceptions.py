class OcrError(Exception):
    """Base exception for text extraction."""


class UnsupportedFileTypeError(OcrError):
    """Raised when a file's MIME type is not on the allow-list."""


class InvalidDataUrlError(OcrError):
    """Raised when a ``data:`` URL is malformed or not base64-encoded."""


class SourceFetchError(OcrError):
    """Raised when a remote file cannot be downloaded."""


class OcrBackendError(OcrError):
    """Raised when the OCR provider rejects a request or returns an error payload."""


class OcrNetworkError(OcrBackendError):
    """Raised when the OCR provider is unreachable or times out."""


class ExtractionError(OcrError):
    """Raised when no usable text could be extracted from a document."""
