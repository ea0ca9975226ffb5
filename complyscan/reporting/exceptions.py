class ReportRenderError(Exception):
    """Raised when a report PDF cannot be produced."""
