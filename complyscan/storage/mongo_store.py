from datetime import datetime, timezone
from typing import Any

from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from complyscan.storage.base import MAX_REPORTS, BaseReportStore
from complyscan.storage.exceptions import (
    ReportAlreadyExistsError,
    ReportOwnershipError,
    StoreUnavailableError,
)
from complyscan.storage.models import PrivacyAgreement, Report
from complyscan.storage.records import agreement_from_record, report_from_record


def _parse_iso(value: str) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class MongoReportStore(BaseReportStore):
    """Store B: reports and agreements as MongoDB documents keyed by ``_id``."""

    name = "mongo"

    def __init__(self, client: MongoClient[dict[str, Any]], database: str) -> None:
        self._client = client
        db = client[database]
        self._reports: Collection[dict[str, Any]] = db["reports"]
        self._agreements: Collection[dict[str, Any]] = db["privacy_agreements"]

    def save(self, report: Report) -> None:
        """Upsert by ``_id`` scoped to the owner; ``createdAt`` is set on insert only.

        Raises:
            ReportOwnershipError: if the id exists under another user.
            StoreUnavailableError: on any other MongoDB error.
        """
        created_at = _parse_iso(report.created_at) or datetime.now(timezone.utc)
        try:
            self._reports.update_one(
                {"_id": report.id, "userId": report.user_id},
                {
                    "$set": {
                        "fileName": report.file_name,
                        "fileUrl": report.file_url,
                        "analysis": report.analysis,
                    },
                    "$setOnInsert": {"createdAt": created_at},
                },
                upsert=True,
            )
        except DuplicateKeyError as exc:
            raise ReportOwnershipError(f"Report {report.id} belongs to another user") from exc
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB error: {exc}") from exc

    def get_all(self, user_id: str) -> list[Report]:
        try:
            cursor = (
                self._reports.find({"userId": user_id})
                .sort("createdAt", DESCENDING)
                .limit(MAX_REPORTS)
            )
            return [report_from_record(document) for document in cursor]
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB error: {exc}") from exc

    def get_one(self, report_id: str, user_id: str) -> Report | None:
        try:
            document = self._reports.find_one({"_id": report_id, "userId": user_id})
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB error: {exc}") from exc
        return report_from_record(document) if document is not None else None

    def save_agreement(self, agreement: PrivacyAgreement) -> None:
        payload = agreement.to_dict()
        payload.pop("id")
        payload["agreementDate"] = _parse_iso(agreement.agreement_date)
        created_at = _parse_iso(payload.pop("createdAt")) or datetime.now(timezone.utc)
        try:
            self._agreements.update_one(
                {"_id": agreement.id},
                {"$set": payload, "$setOnInsert": {"createdAt": created_at}},
                upsert=True,
            )
        except DuplicateKeyError as exc:
            raise ReportAlreadyExistsError(f"Agreement {agreement.id} already exists") from exc
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB error: {exc}") from exc

    def get_agreements(self, user_id: str) -> list[PrivacyAgreement]:
        try:
            cursor = self._agreements.find({"userId": user_id}).sort("createdAt", DESCENDING)
            return [agreement_from_record(document) for document in cursor]
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB error: {exc}") from exc

    def close(self) -> None:
        self._client.close()
