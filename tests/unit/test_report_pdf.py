from unittest.mock import MagicMock, patch

import pytest
from reportlab.platypus.doctemplate import LayoutError

from complyscan.accounts.models import Branding
from complyscan.ocr.sources import RemoteFileFetcher
from complyscan.reporting.exceptions import ReportRenderError
from complyscan.reporting.pdf_report import ReportRenderer, esc, report_file_name

ONE_PIXEL_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

ANALYSIS = {
    "summary": "Handbook covers most requirements <but> misses a few.",
    "overallRiskScore": 6,
    "risks": [
        {
            "issue": "No meal break policy",
            "severity": 8,
            "description": "California requires documented meal breaks.",
            "regulation": "Cal. Labor Code 512",
            "potentialFine": "$50 per violation",
        }
    ],
    "fixes": [{"title": "Add meal break section", "priority": "High", "timeframe": "1 week"}],
    "policyUpdates": ["Update PTO accrual wording"],
    "actionPlan": [{"day": 1, "title": "Review", "tasks": ["Read handbook", "List gaps"]}],
    "potentialFines": "Up to $10,000",
    "positiveFindings": ["Clear anti-harassment policy"],
    "missingPolicies": ["Lactation accommodation"],
    "analyzedAt": "2026-05-01T12:00:00+00:00",
}


@pytest.fixture
def renderer() -> ReportRenderer:
    return ReportRenderer(MagicMock(spec=RemoteFileFetcher))


class TestReportRenderer:
    def test_renders_pdf(self, renderer: ReportRenderer) -> None:
        pdf = renderer.render(ANALYSIS, file_name="handbook.pdf")
        assert pdf.startswith(b"%PDF")

    def test_renders_minimal_analysis(self, renderer: ReportRenderer) -> None:
        assert renderer.render({}).startswith(b"%PDF")

    def test_invalid_color_falls_back(self, renderer: ReportRenderer) -> None:
        branding = Branding(company_name="Acme & Co", primary_color="not-a-color")
        assert renderer.render(ANALYSIS, branding=branding).startswith(b"%PDF")

    def test_data_url_logo(self, renderer: ReportRenderer) -> None:
        branding = Branding(company_name="Acme", logo_url=ONE_PIXEL_PNG)
        assert renderer.render(ANALYSIS, branding=branding).startswith(b"%PDF")

    def test_unreadable_logo_is_skipped(self, renderer: ReportRenderer) -> None:
        branding = Branding(logo_url="data:text/plain;base64,aGVsbG8=")
        assert renderer.render(ANALYSIS, branding=branding).startswith(b"%PDF")

    def test_remote_logo_uses_fetcher(self) -> None:
        fetcher = MagicMock(spec=RemoteFileFetcher)
        fetcher.fetch.side_effect = OSError("unreachable")
        ReportRenderer(fetcher).render(
            ANALYSIS, branding=Branding(logo_url="https://cdn.example.com/logo.png")
        )
        fetcher.fetch.assert_called_once_with("https://cdn.example.com/logo.png")

    def test_loose_entries_are_tolerated(self, renderer: ReportRenderer) -> None:
        analysis = {
            "summary": "ok",
            "risks": ["Missing OSHA poster", 7, None],
            "fixes": "Post the poster",
            "actionPlan": ["Kickoff", {"day": 2, "title": "Review", "tasks": "Read handbook"}],
            "positiveFindings": {"unexpected": "shape"},
        }
        assert renderer.render(analysis).startswith(b"%PDF")

    def test_layout_failure_is_render_error(self, renderer: ReportRenderer) -> None:
        with patch(
            "complyscan.reporting.pdf_report.SimpleDocTemplate.build",
            side_effect=LayoutError("Flowable too large"),
        ):
            with pytest.raises(ReportRenderError):
                renderer.render(ANALYSIS)

    def test_build_failure_is_render_error(self, renderer: ReportRenderer) -> None:
        with patch(
            "complyscan.reporting.pdf_report.SimpleDocTemplate.build",
            side_effect=ValueError("bad flowable"),
        ):
            with pytest.raises(ReportRenderError):
                renderer.render(ANALYSIS)


class TestHelpers:
    def test_esc(self) -> None:
        assert esc("a < b & c > d") == "a &lt; b &amp; c &gt; d"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("", "compliance-report.pdf"), ("handbook", "handbook.pdf"), ("scan.PDF", "scan.PDF")],
    )
    def test_report_file_name(self, name: str, expected: str) -> None:
        assert report_file_name(name) == expected
