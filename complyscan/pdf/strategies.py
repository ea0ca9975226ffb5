"""Ordered rasterization strategies tried for every PDF page.

Each entry is data: which renderer backend to use, at what scale, and how long
to wait before the attempt. Adding or removing a fallback means editing
``DEFAULT_STRATEGIES`` only.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RasterStrategy:
    """One rendering configuration in the fallback cascade."""

    name: str
    renderer: str
    scale: float = 2.0
    delay_seconds: float = 0.0


DEFAULT_STRATEGIES: tuple[RasterStrategy, ...] = (
    RasterStrategy("PyMuPDF (Primary)", "pymupdf", 2.0),
    RasterStrategy("pdfplumber", "pdfplumber", 2.0),
    RasterStrategy("PyMuPDF Reduced Scale", "pymupdf", 1.5),
    RasterStrategy("pdfplumber Reduced Scale", "pdfplumber", 1.5),
    RasterStrategy("PyMuPDF High Scale", "pymupdf", 3.0),
    RasterStrategy("Retry Method 1", "pymupdf", 2.0, delay_seconds=0.1),
    RasterStrategy("Retry Method 2", "pdfplumber", 2.0, delay_seconds=0.2),
    RasterStrategy("Retry Method 3", "pymupdf", 1.5, delay_seconds=0.3),
    RasterStrategy("Low Scale", "pymupdf", 1.0),
    RasterStrategy("Medium Scale", "pymupdf", 1.8),
    RasterStrategy("Retry 4", "pymupdf", 2.0, delay_seconds=0.1),
    RasterStrategy("Retry 5", "pdfplumber", 2.0, delay_seconds=0.2),
    RasterStrategy("Retry 6", "pymupdf", 1.5, delay_seconds=0.3),
    RasterStrategy("Retry 7", "pymupdf", 1.0),
    RasterStrategy("Retry 8", "pymupdf", 1.8),
    RasterStrategy("Final Retry 1", "pymupdf", 2.0),
    RasterStrategy("Final Retry 2", "pdfplumber", 2.0),
    RasterStrategy("Final Retry 3", "pdfplumber", 1.5),
    RasterStrategy("Final Retry 4", "pymupdf", 3.0),
    RasterStrategy("Last Resort", "pymupdf", 2.0, delay_seconds=0.3),
)
