"""Composes a primary and an optional backup store into one persistence policy.

Writes go to both stores so either can serve reads. Reads prefer the primary
and only fall back to the backup when the primary raises.
"""

from collections.abc import Callable
from typing import TypeVar

from complyscan.logging.logger import Log
from complyscan.storage.base import MAX_REPORTS, BaseReportStore
from complyscan.storage.exceptions import (
    ReportAlreadyExistsError,
    StorageError,
    StoreUnavailableError,
)
from complyscan.storage.models import PrivacyAgreement, Report, SaveOutcome
from complyscan.storage.records import sort_newest_first

T = TypeVar("T")


class DualReportStore:
    """Store A (primary) plus store B (backup) with fallback reads."""

    def __init__(self, primary: BaseReportStore, backup: BaseReportStore | None = None) -> None:
        self._primary = primary
        self._backup = backup

    def save(self, report: Report) -> SaveOutcome:
        """Write to the primary, then the backup regardless of the primary's outcome.

        Never raises for store failures; the caller inspects ``SaveOutcome.saved``.
        """
        return self._write_both(lambda store: store.save(report), f"report {report.id}")

    def save_agreement(self, agreement: PrivacyAgreement) -> SaveOutcome:
        return self._write_both(
            lambda store: store.save_agreement(agreement), f"agreement {agreement.id}"
        )

    def get_all(self, user_id: str) -> list[Report]:
        """Merge both stores' reports by id (primary wins), newest first, capped at 100.

        Raises:
            StoreUnavailableError: only if every configured store failed.
        """
        primary_reports = self._try_read(self._primary, lambda s: s.get_all(user_id))
        backup_reports = (
            self._try_read(self._backup, lambda s: s.get_all(user_id))
            if self._backup is not None
            else None
        )
        if primary_reports is None and backup_reports is None:
            raise StoreUnavailableError("No report store is available")

        merged: dict[str, Report] = {}
        for report in backup_reports or []:
            merged[report.id] = report
        for report in primary_reports or []:
            merged[report.id] = report
        return sort_newest_first(list(merged.values()))[:MAX_REPORTS]

    def get_one(self, report_id: str, user_id: str) -> Report | None:
        """The primary's record; the backup's if the primary has none or raised.

        Raises:
            StoreUnavailableError: only if every configured store failed.
        """
        try:
            report = self._primary.get_one(report_id, user_id)
        except StorageError as exc:
            if self._backup is None:
                raise
            Log.warning(f"{self._primary.name} read of report {report_id} failed: {exc}")
            return self._backup.get_one(report_id, user_id)
        if report is None and self._backup is not None:
            try:
                return self._backup.get_one(report_id, user_id)
            except StorageError as exc:
                Log.warning(f"{self._backup.name} read of report {report_id} failed: {exc}")
        return report

    def get_agreements(self, user_id: str) -> list[PrivacyAgreement]:
        try:
            return self._primary.get_agreements(user_id)
        except StorageError as exc:
            if self._backup is None:
                raise
            Log.warning(f"{self._primary.name} agreements read failed, using backup: {exc}")
        return self._backup.get_agreements(user_id)

    def _write_both(self, write: Callable[[BaseReportStore], None], label: str) -> SaveOutcome:
        errors: list[str] = []
        primary_saved = self._try_write(self._primary, write, label, errors, conflict_ok=False)
        backup_saved = (
            self._try_write(self._backup, write, label, errors, conflict_ok=True)
            if self._backup is not None
            else False
        )
        if primary_saved or backup_saved:
            Log.info(
                f"Saved {label} (primary={primary_saved}, backup={backup_saved})"
            )
        else:
            Log.error(f"Failed to save {label} to any store: {'; '.join(errors)}")
        return SaveOutcome(
            primary_saved=primary_saved,
            backup_saved=backup_saved,
            errors=tuple(errors),
        )

    @staticmethod
    def _try_write(
        store: BaseReportStore,
        write: Callable[[BaseReportStore], None],
        label: str,
        errors: list[str],
        *,
        conflict_ok: bool,
    ) -> bool:
        try:
            write(store)
        except ReportAlreadyExistsError as exc:
            if conflict_ok:
                Log.info(f"{label} already exists in {store.name}")
                return True
            Log.warning(f"{store.name} rejected {label}: {exc}")
            errors.append(f"{store.name}: {exc}")
            return False
        except StorageError as exc:
            Log.warning(f"{store.name} write of {label} failed: {exc}")
            errors.append(f"{store.name}: {exc}")
            return False
        return True

    @staticmethod
    def _try_read(store: BaseReportStore, read: Callable[[BaseReportStore], T]) -> T | None:
        try:
            return read(store)
        except StorageError as exc:
            Log.warning(f"{store.name} read failed: {exc}")
            return None

    def close(self) -> None:
        self._primary.close()
        if self._backup is not None:
            self._backup.close()
