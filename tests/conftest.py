import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

HANDBOOK_PAGE_ONE = "Employee Handbook: Workplace Safety"
HANDBOOK_PAGE_TWO = "Section 2: Meal and Rest Breaks"


def build_pdf(*pages: str) -> bytes:
    """A letter-size PDF with one line of text per page; an empty string leaves the page blank."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return build_pdf(HANDBOOK_PAGE_ONE)


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return build_pdf(HANDBOOK_PAGE_ONE, HANDBOOK_PAGE_TWO)


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    return build_pdf("")
