from collections.abc import Callable

ProgressCallback = Callable[[float, str], None]
"""Receives a 0-100 progress value and a human-readable message."""


def report(on_progress: ProgressCallback | None, progress: float, message: str) -> None:
    """Invoke an optional progress callback."""
    if on_progress is not None:
        on_progress(progress, message)


def scaled(
    on_progress: ProgressCallback | None,
    start: float,
    span: float,
) -> ProgressCallback | None:
    """Map a child's 0-100 progress into ``start .. start + span`` of the parent."""
    if on_progress is None:
        return None

    def _callback(progress: float, message: str) -> None:
        on_progress(start + progress * span / 100.0, message)

    return _callback
