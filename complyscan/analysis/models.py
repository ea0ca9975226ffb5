from dataclasses import dataclass, field
from typing import Any

AI_MODELS_USED: tuple[str, ...] = ("GPT-4o", "Pal Nexus")


@dataclass(frozen=True)
class Risk:
    """A single compliance finding."""

    issue: str
    description: str
    severity: float
    regulation: str
    potential_fine: str
    location: str = ""
    likelihood: str = ""
    impact: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "issue": self.issue,
            "description": self.description,
            "severity": self.severity,
            "regulation": self.regulation,
            "potentialFine": self.potential_fine,
        }
        for key, value in (
            ("location", self.location),
            ("likelihood", self.likelihood),
            ("impact", self.impact),
        ):
            if value:
                data[key] = value
        return data


@dataclass(frozen=True)
class Fix:
    """A recommended remediation."""

    title: str
    description: str
    priority: str
    timeframe: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "timeframe": self.timeframe,
        }


@dataclass(frozen=True)
class ActionPlanDay:
    """One day of the remediation plan."""

    day: int
    title: str
    tasks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day, "title": self.title, "tasks": list(self.tasks)}


@dataclass(frozen=True)
class AnalysisResult:
    """Normalized output of the analysis engine."""

    summary: str
    overall_risk_score: float
    risks: list[Risk] = field(default_factory=list)
    fixes: list[Fix] = field(default_factory=list)
    policy_updates: list[str] = field(default_factory=list)
    action_plan: list[ActionPlanDay] = field(default_factory=list)
    potential_fines: str = ""
    positive_findings: list[str] = field(default_factory=list)
    missing_policies: list[str] = field(default_factory=list)
    document_word_count: int = 0
    analyzed_at: str = ""
    ai_models_used: tuple[str, ...] = AI_MODELS_USED

    def to_dict(self) -> dict[str, Any]:
        """Wire representation with camelCase keys, as stored and served."""
        return {
            "summary": self.summary,
            "overallRiskScore": self.overall_risk_score,
            "risks": [risk.to_dict() for risk in self.risks],
            "fixes": [fix.to_dict() for fix in self.fixes],
            "policyUpdates": list(self.policy_updates),
            "actionPlan": [day.to_dict() for day in self.action_plan],
            "potentialFines": self.potential_fines,
            "positiveFindings": list(self.positive_findings),
            "missingPolicies": list(self.missing_policies),
            "documentWordCount": self.document_word_count,
            "analyzedAt": self.analyzed_at,
            "aiModelsUsed": list(self.ai_models_used),
        }
