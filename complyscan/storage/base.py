from abc import ABC, abstractmethod

from complyscan.storage.models import PrivacyAgreement, Report

MAX_REPORTS = 100


class BaseReportStore(ABC):
    """Contract for a single backing store of reports and privacy agreements."""

    name: str = "store"

    @abstractmethod
    def save(self, report: Report) -> None:
        """Upsert a report by id. ``created_at`` is kept from the first write.

        Raises:
            StoreUnavailableError: if the store cannot be written.
            ReportOwnershipError: if the id is taken by another user's report.
        """

    @abstractmethod
    def get_all(self, user_id: str) -> list[Report]:
        """Return up to 100 of the user's reports, newest first."""

    @abstractmethod
    def get_one(self, report_id: str, user_id: str) -> Report | None:
        """Return the report if it exists and belongs to the user."""

    @abstractmethod
    def save_agreement(self, agreement: PrivacyAgreement) -> None:
        """Upsert a privacy agreement by id."""

    @abstractmethod
    def get_agreements(self, user_id: str) -> list[PrivacyAgreement]:
        """Return the user's privacy agreements, newest first."""

    def close(self) -> None:
        """Release client resources held by the store."""
