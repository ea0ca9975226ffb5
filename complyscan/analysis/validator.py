"""Normalizes raw model JSON into an AnalysisResult.

Unlike strict schema validation, every field is repaired rather than rejected:
scores are clamped, missing text gets a placeholder and an empty plan is
replaced by the fixed seven-day template.
"""

import math
from typing import Any

from complyscan.analysis.models import ActionPlanDay, AnalysisResult, Fix, Risk

MAX_RISKS = 5
DEFAULT_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

DEFAULT_SUMMARY = (
    "Compliance analysis completed. Please review all identified risks and recommendations."
)
DEFAULT_POTENTIAL_FINES = "Varies by violation - see individual risks for details"

FALLBACK_ACTION_PLAN: tuple[tuple[str, tuple[str, str]], ...] = (
    ("Review & Prioritize", ("Review all findings with management", "Prioritize critical issues")),
    ("Documentation", ("Gather current policies", "Identify gaps")),
    ("Draft Updates", ("Draft policy revisions", "Legal review")),
    ("Finalize", ("Finalize policy changes", "Prepare training materials")),
    ("Implementation", ("Update official documents", "Begin rollout")),
    ("Training", ("Conduct staff training", "Collect acknowledgments")),
    ("Verification", ("Verify all changes implemented", "Schedule follow-up audit")),
)


def validate_and_build(
    data: dict[str, Any],
    *,
    document_word_count: int,
    analyzed_at: str,
) -> AnalysisResult:
    """Build a normalized AnalysisResult from parsed model output."""
    risks = [_build_risk(item) for item in _as_list(data.get("risks"))[:MAX_RISKS]]
    risks.sort(key=lambda risk: risk.severity, reverse=True)

    action_plan = [
        _build_day(item, index) for index, item in enumerate(_as_list(data.get("actionPlan")))
    ]
    if not action_plan:
        action_plan = fallback_action_plan()

    return AnalysisResult(
        summary=_text(data.get("summary")) or DEFAULT_SUMMARY,
        overall_risk_score=clamp_score(data.get("overallRiskScore")),
        risks=risks,
        fixes=[_build_fix(item) for item in _as_list(data.get("fixes"))],
        policy_updates=[
            text
            for text in map(_flatten_policy_update, _as_list(data.get("policyUpdates")))
            if text
        ],
        action_plan=action_plan,
        potential_fines=_text(data.get("potentialFines")) or DEFAULT_POTENTIAL_FINES,
        positive_findings=_string_list(data.get("positiveFindings")),
        missing_policies=_string_list(data.get("missingPolicies")),
        document_word_count=document_word_count,
        analyzed_at=analyzed_at,
    )


def fallback_action_plan() -> list[ActionPlanDay]:
    return [
        ActionPlanDay(day=day, title=title, tasks=list(tasks))
        for day, (title, tasks) in enumerate(FALLBACK_ACTION_PLAN, start=1)
    ]


def clamp_score(value: Any) -> float:
    """Clamp to [1, 10]; missing, zero or non-numeric values become 5."""
    if isinstance(value, bool):
        number = 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = 0.0
    if math.isnan(number) or not number:
        number = DEFAULT_SCORE
    number = min(MAX_SCORE, max(MIN_SCORE, number))
    return int(number) if float(number).is_integer() else number


def _build_risk(raw: Any) -> Risk:
    item = raw if isinstance(raw, dict) else {}
    return Risk(
        issue=_text(item.get("issue")) or _text(item.get("title")) or "Compliance Issue",
        description=_text(item.get("description")),
        severity=clamp_score(item.get("severity")),
        regulation=_text(item.get("regulation")) or "Various",
        potential_fine=_text(item.get("potentialFine")) or "Varies",
        location=_text(item.get("location")) or _text(item.get("section")),
        likelihood=_text(item.get("likelihood")),
        impact=_text(item.get("impact")),
    )


def _build_fix(raw: Any) -> Fix:
    item = raw if isinstance(raw, dict) else {}
    return Fix(
        title=_text(item.get("title")) or "Recommended Fix",
        description=_text(item.get("description")),
        priority=_text(item.get("priority")) or "Medium",
        timeframe=_text(item.get("timeframe")) or "Within 7 days",
    )


def _build_day(raw: Any, index: int) -> ActionPlanDay:
    item = raw if isinstance(raw, dict) else {}
    day = item.get("day")
    if isinstance(day, bool) or not isinstance(day, int) or day < 1:
        day = index + 1
    return ActionPlanDay(
        day=day,
        title=_text(item.get("title")) or f"Day {index + 1}",
        tasks=[task for task in (_flatten_task(t) for t in _as_list(item.get("tasks"))) if task],
    )


def _flatten_task(raw: Any) -> str:
    """Structured tasks become ``"task (Owner: x) [time]"``."""
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, dict):
        return _text(raw)
    text = _text(raw.get("task"))
    owner = _text(raw.get("owner"))
    time = _text(raw.get("time"))
    if owner:
        text += f" (Owner: {owner})"
    if time:
        text += f" [{time}]"
    return text


def _flatten_policy_update(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, dict):
        return _text(raw)
    section = _text(raw.get("section"))
    suggested = _text(raw.get("suggestedLanguage")) or _text(raw.get("suggested"))
    rationale = _text(raw.get("rationale"))
    text = f"{section}: {suggested}" if section and suggested else section or suggested
    if rationale:
        text += f" (Rationale: {rationale})"
    return text


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _string_list(value: Any) -> list[str]:
    return [item for item in (_text(v) for v in _as_list(value)) if item]


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()
