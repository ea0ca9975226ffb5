import queue
import threading
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from typing import Any

from complyscan.accounts.exceptions import (
    AuthenticationError,
    AuthorizationError,
    QuotaExceededError,
)
from complyscan.accounts.models import Principal
from complyscan.accounts.service import AccountService
from complyscan.analysis.base import BaseAnalyzer
from complyscan.logging.logger import Log
from complyscan.ocr.extractor import TextExtractor
from complyscan.pipeline.context import AnalyzeOutcome, PipelineContext, PipelineStep, Stage
from complyscan.pipeline.exceptions import PipelineError
from complyscan.pipeline.steps import (
    AcceptTextStep,
    AnalyzeStep,
    CheckQuotaStep,
    ExtractTextStep,
    PersistStep,
    ValidateAuthStep,
)
from complyscan.progress import ProgressCallback, report
from complyscan.storage.dual_store import DualReportStore

_DONE = object()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_event(exc: Exception, stage: Stage) -> dict[str, Any]:
    """Terminal stream event for a failed run."""
    event: dict[str, Any] = {"type": "error", "stage": stage.value}
    if isinstance(exc, QuotaExceededError):
        event.update(error=str(exc), code="quota_exceeded", limitReached=True, limit=exc.limit)
    elif isinstance(exc, PipelineError):
        event.update(error=str(exc), code=exc.code)
    elif isinstance(exc, AuthenticationError):
        event.update(error="Unauthorized", code="unauthorized")
    elif isinstance(exc, AuthorizationError):
        event.update(error=str(exc), code="forbidden")
    else:
        event.update(error="Failed to analyze document", code="internal_error")
    return event


class AnalyzeOrchestrator:
    """Runs the analyze pipeline: auth -> quota -> extract -> analyze -> persist.

    The gate steps (auth and quota) run in ``prepare`` so callers can reject a
    request with a plain status code before committing to a stream. The work
    steps run in ``run`` or ``stream``.
    """

    def __init__(
        self,
        *,
        accounts: AccountService,
        extractor: TextExtractor,
        analyzer: BaseAnalyzer,
        store: DualReportStore,
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        self._gate_steps: list[PipelineStep] = [
            ValidateAuthStep(),
            CheckQuotaStep(accounts),
        ]
        analyze = AnalyzeStep(analyzer)
        persist = PersistStep(store, accounts, clock=clock)
        self._file_steps: list[PipelineStep] = [ExtractTextStep(extractor), analyze, persist]
        self._text_steps: list[PipelineStep] = [AcceptTextStep(), analyze, persist]

    def analyze_file(
        self,
        principal: Principal,
        *,
        file_url: str,
        file_name: str = "",
        file_id: str = "",
        on_progress: ProgressCallback | None = None,
    ) -> AnalyzeOutcome:
        context = self.prepare(
            principal, file_url=file_url, file_name=file_name, file_id=file_id
        )
        return self.run(context, on_progress)

    def analyze_text(
        self,
        principal: Principal,
        *,
        text: str,
        file_name: str = "",
    ) -> AnalyzeOutcome:
        context = self.prepare(principal, text=text, file_name=file_name)
        return self.run(context)

    def prepare(
        self,
        principal: Principal,
        *,
        file_url: str = "",
        file_name: str = "",
        file_id: str = "",
        text: str = "",
    ) -> PipelineContext:
        """Build a context and run the gate steps on it.

        Raises:
            AuthenticationError, InputRejectedError, QuotaExceededError.
        """
        context = PipelineContext(
            principal=principal,
            file_url=file_url,
            file_name=file_name,
            file_id=file_id,
            direct_text=text,
        )
        self._run_steps(self._gate_steps, context, None)
        return context

    def run(
        self,
        context: PipelineContext,
        on_progress: ProgressCallback | None = None,
    ) -> AnalyzeOutcome:
        """Run the work steps on a prepared context."""
        steps = self._text_steps if context.direct_text else self._file_steps
        self._run_steps(steps, context, on_progress)

        context.stage = Stage.RESPONDING
        report(on_progress, 100, "Complete!")
        if context.report is None or context.analysis is None:
            raise RuntimeError("Pipeline finished without a report")
        Log.info(
            f"Analyzed report {context.report.id} for {context.principal.user_id}: "
            f"score {context.analysis.overall_risk_score}"
        )
        return AnalyzeOutcome(
            report_id=context.report.id,
            analysis=context.analysis,
            ocr=context.ocr,
            saved=context.save_outcome.saved if context.save_outcome else False,
            warning=context.warning,
            alert=context.alert,
        )

    def stream(self, context: PipelineContext) -> Iterator[dict[str, Any]]:
        """Run the work steps in a worker thread, yielding progress events.

        Yields ``progress`` events in order, then exactly one terminal
        ``complete`` or ``error`` event.
        """
        events: queue.Queue = queue.Queue()

        def on_progress(progress: float, message: str) -> None:
            events.put(
                {
                    "type": "progress",
                    "stage": context.stage.value,
                    "progress": round(progress, 1),
                    "message": message,
                }
            )

        def work() -> None:
            try:
                outcome = self.run(context, on_progress)
                events.put({"type": "complete", **outcome.to_dict()})
            except Exception as exc:
                failed_stage = context.stage
                context.stage = Stage.ERROR
                Log.exception(f"Streaming analysis failed at {failed_stage.value}: {exc}")
                events.put(error_event(exc, failed_stage))
            finally:
                events.put(_DONE)

        worker = threading.Thread(target=work, name="analyze-stream", daemon=True)
        worker.start()
        while True:
            event = events.get()
            if event is _DONE:
                break
            yield event
        worker.join()

    @staticmethod
    def _run_steps(
        steps: list[PipelineStep],
        context: PipelineContext,
        on_progress: ProgressCallback | None,
    ) -> None:
        for step in steps:
            context.stage = step.stage
            Log.debug(f"Running stage {step.stage.value} for {context.principal.user_id}")
            step.run(context, on_progress)
