class PipelineError(Exception):
    """Base exception for analyze pipeline failures surfaced to callers."""

    code = "pipeline_error"


class InputRejectedError(PipelineError):
    """Raised for a request the pipeline refuses before doing any backend work."""

    code = "input_rejected"


class ExtractionFailedError(PipelineError):
    """Raised when no usable text could be extracted from the document."""

    code = "extraction_failed"


class AnalysisFailedError(PipelineError):
    """Raised when the completion backend fails or returns unusable output."""

    code = "analysis_failed"


class FileTooLargeError(InputRejectedError):
    """Raised when an upload exceeds the configured size cap."""

    code = "file_too_large"
