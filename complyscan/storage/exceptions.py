class StorageError(Exception):
    """Base exception for report persistence."""


class StoreUnavailableError(StorageError):
    """Raised when a backing store cannot be reached or rejects an operation."""


class ReportAlreadyExistsError(StorageError):
    """Raised when a write conflicts with an existing record under the same id."""


class ReportNotFoundError(StorageError):
    """Raised when a report does not exist or belongs to another user."""


class ReportOwnershipError(StorageError):
    """Raised when a report id is already taken by another user's report."""
