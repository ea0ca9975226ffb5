import uuid
from collections.abc import Callable

from complyscan.accounts.exceptions import AccountError, AuthenticationError, IdentityProviderError
from complyscan.accounts.service import AccountService
from complyscan.analysis.base import BaseAnalyzer
from complyscan.analysis.exceptions import AnalysisError
from complyscan.logging.logger import Log
from complyscan.ocr.exceptions import InvalidDataUrlError, OcrError, UnsupportedFileTypeError
from complyscan.ocr.extractor import TextExtractor
from complyscan.ocr.sources import PDF_MIME_TYPE
from complyscan.pdf.exceptions import PdfError
from complyscan.pipeline.context import PipelineContext, PipelineStep, Stage
from complyscan.pipeline.exceptions import (
    AnalysisFailedError,
    ExtractionFailedError,
    InputRejectedError,
)
from complyscan.progress import ProgressCallback, report, scaled
from complyscan.storage.dual_store import DualReportStore
from complyscan.storage.models import Report

MIN_PDF_TEXT_CHARS = 20
MIN_IMAGE_TEXT_CHARS = 50
MIN_DIRECT_TEXT_CHARS = 50
LOW_WORDS_PER_PAGE = 20

UNSAVED_WARNING = (
    "The report was generated but could not be saved. "
    "Download the PDF now to keep a copy."
)


def multi_page_prompt(text: str, page_count: int) -> str:
    if page_count <= 1:
        return text
    return (
        f"IMPORTANT: This document has {page_count} pages. "
        f"Analyze ALL pages, not just the first one.\n\n{text}"
    )


class ValidateAuthStep(PipelineStep):
    stage = Stage.VALIDATING_AUTH

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        if not context.principal.user_id:
            raise AuthenticationError("Unauthorized")
        if not context.direct_text and not context.file_url:
            raise InputRejectedError("File URL is required")
        return context


class CheckQuotaStep(PipelineStep):
    stage = Stage.CHECKING_QUOTA

    def __init__(self, accounts: AccountService) -> None:
        self._accounts = accounts

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        try:
            context.subscription = self._accounts.check_quota(context.principal)
        except IdentityProviderError as exc:
            Log.warning(f"Upload limit check failed for {context.principal.user_id}, continuing: {exc}")
        return context


class ExtractTextStep(PipelineStep):
    stage = Stage.EXTRACTING_TEXT

    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        report(on_progress, 5, "Preparing document...")
        try:
            ocr = self._extractor.extract_text(context.file_url, scaled(on_progress, 5, 35))
        except (UnsupportedFileTypeError, InvalidDataUrlError) as exc:
            raise InputRejectedError(str(exc)) from exc
        except (OcrError, PdfError) as exc:
            raise ExtractionFailedError(str(exc)) from exc

        is_pdf = ocr.mime_type == PDF_MIME_TYPE
        min_chars = MIN_PDF_TEXT_CHARS if is_pdf else MIN_IMAGE_TEXT_CHARS
        extracted = len(ocr.text.strip())
        if extracted < min_chars:
            raise ExtractionFailedError(
                "Could not extract sufficient text from the document. "
                f"Only extracted {extracted} characters. Please ensure the document "
                "contains readable text, or try converting it to PNG/JPG."
            )

        words = ocr.word_count
        if is_pdf and ocr.page_count > 1:
            per_page = words / ocr.page_count
            if per_page < LOW_WORDS_PER_PAGE:
                Log.warning(
                    f"PDF has {ocr.page_count} pages but only {words} words extracted "
                    f"({per_page:.1f} words/page). Some pages may not have been processed."
                )
                message = (
                    f"WARNING: PDF has {ocr.page_count} pages but limited text extracted. "
                    "Processing what we have..."
                )
            else:
                message = (
                    f"Extracted {words} words from all {ocr.page_count} pages. "
                    "Starting compliance analysis..."
                )
        else:
            message = f"Extracted {words} words. Starting compliance analysis..."
        report(on_progress, 40, message)

        Log.info(
            f"Extracted {words} words from {ocr.page_count} page(s) "
            f"with {ocr.confidence * 100:.1f}% confidence"
        )
        context.ocr = ocr
        context.analysis_text = multi_page_prompt(ocr.text, ocr.page_count)
        return context


class AcceptTextStep(PipelineStep):
    """Direct text analysis: the caller supplies the text, nothing is extracted."""

    stage = Stage.EXTRACTING_TEXT

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        if len(context.direct_text.strip()) < MIN_DIRECT_TEXT_CHARS:
            raise InputRejectedError(
                f"Text must be at least {MIN_DIRECT_TEXT_CHARS} characters"
            )
        context.analysis_text = context.direct_text
        report(on_progress, 40, "Starting compliance analysis...")
        return context


class AnalyzeStep(PipelineStep):
    stage = Stage.ANALYZING

    def __init__(self, analyzer: BaseAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        pages = context.ocr.page_count if context.ocr is not None else 1
        report(on_progress, 45, f"Analyzing compliance risks from {pages} page(s)...")
        try:
            context.analysis = self._analyzer.analyze_compliance(context.analysis_text)
        except AnalysisError as exc:
            raise AnalysisFailedError("Failed to analyze document") from exc
        report(on_progress, 90, "Analysis complete. Saving report...")
        return context


class PersistStep(PipelineStep):
    """Saves the report, then does quota and alert bookkeeping.

    A failed save does not fail the request: the analysis is returned with
    ``saved=False`` and a warning instead.
    """

    stage = Stage.PERSISTING

    def __init__(
        self,
        store: DualReportStore,
        accounts: AccountService,
        *,
        clock: Callable[[], str],
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._store = store
        self._accounts = accounts
        self._clock = clock
        self._id_factory = id_factory

    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        if context.analysis is None:
            raise ValueError("PipelineContext.analysis must be set before persist")
        default_name = "Direct Text Analysis" if context.direct_text else "Untitled Document"
        context.report = Report(
            id=context.file_id or self._id_factory(),
            user_id=context.principal.user_id,
            file_name=context.file_name or default_name,
            file_url=context.file_url,
            analysis=context.analysis.to_dict(),
            created_at=self._clock(),
        )
        context.save_outcome = self._store.save(context.report)

        if not context.save_outcome.saved:
            context.warning = UNSAVED_WARNING
            report(on_progress, 95, "Report generated (saving to database failed)")
            return context

        report(on_progress, 95, "Report saved successfully")
        try:
            self._accounts.record_upload(context.principal)
            context.alert = self._accounts.record_high_risk_alert(
                context.principal,
                report_id=context.report.id,
                file_name=context.report.file_name,
                risk_score=context.analysis.overall_risk_score,
            )
        except AccountError as exc:
            Log.warning(
                f"Account bookkeeping failed for report {context.report.id}: {exc}"
            )
        return context
