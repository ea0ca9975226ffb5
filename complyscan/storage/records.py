"""Normalizes raw store records into domain models.

Both stores, and rows written by older clients, disagree on key casing and
timestamp representation. Everything read back goes through here.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from complyscan.logging.logger import Log
from complyscan.storage.models import PrivacyAgreement, Report

_EPOCH_MILLIS_THRESHOLD = 1e11


def to_iso(value: Any) -> str:
    """Convert a datetime, epoch number, timestamp dict or date string to ISO-8601.

    Values that cannot be read as a timestamp become an empty string.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > _EPOCH_MILLIS_THRESHOLD else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)):
            return to_iso(seconds)
        return ""
    if isinstance(value, str):
        try:
            return to_iso(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            Log.warning(f"Dropping unreadable timestamp {value!r}")
            return ""
    Log.warning(f"Dropping unsupported timestamp type {type(value).__name__}")
    return ""


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def report_from_record(record: Mapping[str, Any]) -> Report:
    report_id = str(_pick(record, "id", "_id", default=""))
    analysis = _pick(record, "analysis", default={})
    return Report(
        id=report_id,
        user_id=str(_pick(record, "user_id", "userId", default="")),
        file_name=_pick(record, "file_name", "fileName") or f"Report {report_id[:8]}",
        file_url=_pick(record, "file_url", "fileUrl", default=""),
        analysis=dict(analysis) if isinstance(analysis, Mapping) else {},
        created_at=to_iso(_pick(record, "created_at", "createdAt")),
    )


def agreement_from_record(record: Mapping[str, Any]) -> PrivacyAgreement:
    return PrivacyAgreement(
        id=str(_pick(record, "id", "_id", default="")),
        user_id=str(_pick(record, "user_id", "userId", default="")),
        user_email=_pick(record, "user_email", "userEmail", default=""),
        agreed=bool(_pick(record, "agreed", default=True)),
        agreement_date=to_iso(_pick(record, "agreement_date", "agreementDate")),
        dont_show_again=bool(_pick(record, "dont_show_again", "dontShowAgain", default=False)),
        ip_address=_pick(record, "ip_address", "ipAddress", default=""),
        user_agent=_pick(record, "user_agent", "userAgent", default=""),
        agreement_text=_pick(record, "agreement_text", "agreementText", default=""),
        agreement_version=_pick(record, "agreement_version", "agreementVersion", default="2.0"),
        created_at=to_iso(_pick(record, "created_at", "createdAt")),
    )


def sort_newest_first(reports: list[Report]) -> list[Report]:
    return sorted(reports, key=lambda report: report.created_at, reverse=True)
