"""PDF rendition of a stored analysis, with optional account branding."""

import io
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer
from reportlab.platypus.doctemplate import LayoutError

from complyscan.accounts.models import DEFAULT_PRIMARY_COLOR, Branding
from complyscan.logging.logger import Log
from complyscan.ocr.exceptions import OcrError
from complyscan.ocr.sources import RemoteFileFetcher, load_source
from complyscan.reporting.exceptions import ReportRenderError

LOGO_MAX_WIDTH = 1.8 * inch
LOGO_MAX_HEIGHT = 0.8 * inch


def esc(text: Any) -> str:
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def report_file_name(file_name: str) -> str:
    base = file_name.strip() or "compliance-report"
    return base if base.lower().endswith(".pdf") else f"{base}.pdf"


def _items(value: Any) -> list[Any]:
    if isinstance(value, list):
        return [item for item in value if item not in (None, "")]
    return [value] if isinstance(value, (str, int, float)) and value != "" else []


def _entries(value: Any, text_key: str) -> list[dict[str, Any]]:
    """Keep dict entries; a bare string becomes ``{text_key: value}``, anything else is dropped."""
    entries: list[dict[str, Any]] = []
    for item in _items(value):
        if isinstance(item, dict):
            entries.append(item)
        elif isinstance(item, str):
            entries.append({text_key: item})
    return entries


class ReportRenderer:
    """Renders an analysis dict (wire format) to PDF bytes."""

    def __init__(self, fetcher: RemoteFileFetcher | None = None) -> None:
        self._fetcher = fetcher or RemoteFileFetcher()

    def render(
        self,
        analysis: dict[str, Any],
        *,
        file_name: str = "",
        branding: Branding | None = None,
    ) -> bytes:
        branding = branding or Branding()
        accent = self._accent_color(branding.primary_color)
        styles = self._styles(accent)
        title = f"Compliance Report - {file_name or 'Document'}"

        story: list[Any] = []
        logo = self._logo(branding.logo_url)
        if logo is not None:
            story.extend([logo, Spacer(1, 0.15 * inch)])
        if branding.company_name:
            story.append(Paragraph(esc(branding.company_name), styles["company"]))
        story.append(Paragraph(esc(title), styles["title"]))

        meta = f"Overall risk score: {analysis.get('overallRiskScore', 'n/a')}/10"
        if analysis.get("analyzedAt"):
            meta += f" | Analyzed {analysis['analyzedAt']}"
        story.append(Paragraph(esc(meta), styles["meta"]))
        story.append(Spacer(1, 0.2 * inch))

        self._section(story, styles, "Summary", [analysis.get("summary") or ""])

        risks = _entries(analysis.get("risks"), "issue")
        if risks:
            story.append(Paragraph("Compliance Risks", styles["h2"]))
            for risk in risks:
                story.append(
                    Paragraph(
                        esc(f"{risk.get('issue', 'Issue')} (severity {risk.get('severity', '?')}/10)"),
                        styles["h3"],
                    )
                )
                story.append(Paragraph(esc(risk.get("description", "")), styles["body"]))
                details = [
                    f"Regulation: {risk['regulation']}" if risk.get("regulation") else "",
                    f"Potential fine: {risk['potentialFine']}" if risk.get("potentialFine") else "",
                ]
                for detail in filter(None, details):
                    story.append(Paragraph(esc(detail), styles["bullet"]))

        fixes = _entries(analysis.get("fixes"), "title")
        if fixes:
            story.append(Paragraph("Recommended Fixes", styles["h2"]))
            for fix in fixes:
                heading = (
                    f"{fix.get('title', 'Recommended Fix')} "
                    f"[{fix.get('priority', 'Medium')}, {fix.get('timeframe', '')}]"
                )
                story.append(Paragraph(esc(heading), styles["h3"]))
                if fix.get("description"):
                    story.append(Paragraph(esc(fix["description"]), styles["body"]))

        self._bullets(story, styles, "Policy Updates", _items(analysis.get("policyUpdates")))

        plan = _entries(analysis.get("actionPlan"), "title")
        if plan:
            story.append(Paragraph("7-Day Action Plan", styles["h2"]))
            for day in plan:
                story.append(
                    Paragraph(esc(f"Day {day.get('day', '?')}: {day.get('title', '')}"), styles["h3"])
                )
                for task in _items(day.get("tasks")):
                    story.append(Paragraph(esc(f"• {task}"), styles["bullet"]))

        if analysis.get("potentialFines"):
            self._section(story, styles, "Potential Fines", [analysis["potentialFines"]])
        self._bullets(story, styles, "Positive Findings", _items(analysis.get("positiveFindings")))
        self._bullets(story, styles, "Missing Policies", _items(analysis.get("missingPolicies")))

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=LETTER,
            leftMargin=0.8 * inch,
            rightMargin=0.8 * inch,
            topMargin=0.8 * inch,
            bottomMargin=0.8 * inch,
            title=title,
            author=branding.company_name or "complyscan",
        )
        try:
            doc.build(story)
        except (LayoutError, ValueError, OSError) as exc:
            raise ReportRenderError(f"Failed to render report PDF: {exc}") from exc
        return buf.getvalue()

    @staticmethod
    def _accent_color(value: str) -> colors.Color:
        try:
            return colors.HexColor(value)
        except ValueError:
            Log.warning(f"Invalid branding color {value!r}, using default")
            return colors.HexColor(DEFAULT_PRIMARY_COLOR)

    @staticmethod
    def _styles(accent: colors.Color) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "company": ParagraphStyle("Company", parent=base["Heading3"], textColor=accent),
            "title": ParagraphStyle("Title", parent=base["Heading1"], textColor=accent, spaceAfter=6),
            "meta": ParagraphStyle("Meta", parent=base["BodyText"], textColor=colors.grey),
            "h2": ParagraphStyle("H2", parent=base["Heading2"], textColor=accent, spaceBefore=10, spaceAfter=6),
            "h3": ParagraphStyle("H3", parent=base["Heading3"], spaceBefore=6, spaceAfter=3),
            "body": ParagraphStyle("Body", parent=base["BodyText"], leading=14, spaceAfter=6),
            "bullet": ParagraphStyle("Bullet", parent=base["BodyText"], leftIndent=18, spaceBefore=2),
        }

    @staticmethod
    def _section(story: list[Any], styles: dict[str, ParagraphStyle], heading: str, paragraphs: list[str]) -> None:
        story.append(Paragraph(esc(heading), styles["h2"]))
        for text in paragraphs:
            story.append(Paragraph(esc(text), styles["body"]))

    @staticmethod
    def _bullets(story: list[Any], styles: dict[str, ParagraphStyle], heading: str, items: list[Any]) -> None:
        if not items:
            return
        story.append(Paragraph(esc(heading), styles["h2"]))
        for item in items:
            story.append(Paragraph(esc(f"• {item}"), styles["bullet"]))

    def _logo(self, logo_url: str) -> Image | None:
        if not logo_url:
            return None
        try:
            source = load_source(logo_url, self._fetcher)
            width, height = ImageReader(io.BytesIO(source.data)).getSize()
        except (OcrError, OSError, ValueError) as exc:
            Log.warning(f"Skipping branding logo: {exc}")
            return None
        scale = min(LOGO_MAX_WIDTH / width, LOGO_MAX_HEIGHT / height, 1.0)
        logo = Image(io.BytesIO(source.data), width=width * scale, height=height * scale)
        logo.hAlign = "LEFT"
        return logo
