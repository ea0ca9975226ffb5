class AnalysisError(Exception):
    """Raised when compliance analysis fails."""


class AnalysisResponseError(AnalysisError):
    """Raised when the model output cannot be parsed into a JSON object."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the completion provider call fails due to network/infrastructure issues."""
