from abc import ABC, abstractmethod

from complyscan.analysis.models import AnalysisResult


class BaseAnalyzer(ABC):
    """Contract for compliance analysis engines."""

    @abstractmethod
    def analyze_compliance(self, document_text: str) -> AnalysisResult:
        """Produce a normalized compliance analysis for extracted document text.

        Args:
            document_text: Plain text from the text extractor, possibly
                prefixed with a multi-page hint.

        Returns:
            AnalysisResult with clamped scores, at most five risks and a
            non-empty action plan.

        Raises:
            AnalysisError: on any failure. No partial result is returned.
        """
