from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from complyscan.accounts.models import Principal, Subscription
from complyscan.analysis.models import AnalysisResult
from complyscan.ocr.models import OCRResult
from complyscan.progress import ProgressCallback
from complyscan.storage.models import Report, SaveOutcome


class Stage(str, Enum):
    VALIDATING_AUTH = "validating-auth"
    CHECKING_QUOTA = "checking-quota"
    EXTRACTING_TEXT = "extracting-text"
    ANALYZING = "analyzing"
    PERSISTING = "persisting"
    RESPONDING = "responding"
    ERROR = "error"


@dataclass(slots=True)
class PipelineContext:
    principal: Principal
    file_url: str = ""
    file_name: str = ""
    file_id: str = ""
    direct_text: str = ""
    stage: Stage = Stage.VALIDATING_AUTH
    subscription: Subscription | None = None
    ocr: OCRResult | None = None
    analysis_text: str = ""
    analysis: AnalysisResult | None = None
    report: Report | None = None
    save_outcome: SaveOutcome | None = None
    alert: dict[str, Any] | None = None
    warning: str = ""


class PipelineStep(ABC):
    stage: Stage

    @abstractmethod
    def run(self, context: PipelineContext, on_progress: ProgressCallback | None) -> PipelineContext:
        raise NotImplementedError


@dataclass(frozen=True)
class AnalyzeOutcome:
    """Final result of one analyze request."""

    report_id: str
    analysis: AnalysisResult
    ocr: OCRResult | None = None
    saved: bool = True
    warning: str = ""
    alert: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": True,
            "reportId": self.report_id,
            "analysis": self.analysis.to_dict(),
            "saved": self.saved,
            "alertTriggered": self.alert is not None,
        }
        if self.ocr is not None:
            data["ocr"] = {
                "confidence": self.ocr.confidence,
                "pageCount": self.ocr.page_count,
                "wordCount": self.ocr.word_count,
            }
        if self.warning:
            data["warning"] = self.warning
        if self.alert is not None:
            data["alertInfo"] = self.alert
        return data
