from datetime import datetime

import pytest

from complyscan.storage.exceptions import ReportOwnershipError
from complyscan.storage.models import PrivacyAgreement, Report
from complyscan.storage.mongo_store import MongoReportStore

pytestmark = pytest.mark.integration


def _report(report_id: str, user_id: str, created_at: str = "2026-01-15T09:30:00+00:00") -> Report:
    return Report(
        id=report_id,
        user_id=user_id,
        file_name="handbook.pdf",
        file_url="https://files.example.com/handbook.pdf",
        analysis={"summary": "ok", "overallRiskScore": 4, "risks": []},
        created_at=created_at,
    )


class TestMongoReportStore:
    def test_save_then_get_one(self, mongo_store: MongoReportStore, user_id: str) -> None:
        saved = _report(f"{user_id}_r1", user_id)
        mongo_store.save(saved)

        loaded = mongo_store.get_one(saved.id, user_id)

        assert loaded is not None
        assert loaded.analysis == saved.analysis
        assert datetime.fromisoformat(loaded.created_at) == datetime.fromisoformat(saved.created_at)

    def test_same_id_overwrites_but_keeps_created_at(
        self, mongo_store: MongoReportStore, user_id: str
    ) -> None:
        report_id = f"{user_id}_r1"
        mongo_store.save(_report(report_id, user_id))
        mongo_store.save(
            Report(id=report_id, user_id=user_id, file_name="renamed.pdf", created_at="2030-01-01T00:00:00Z")
        )

        loaded = mongo_store.get_one(report_id, user_id)

        assert loaded is not None
        assert loaded.file_name == "renamed.pdf"
        assert loaded.created_at.startswith("2026-01-15")

    def test_other_user_cannot_overwrite(self, mongo_store: MongoReportStore, user_id: str) -> None:
        report_id = f"{user_id}_r1"
        mongo_store.save(_report(report_id, user_id))

        with pytest.raises(ReportOwnershipError):
            mongo_store.save(_report(report_id, "someone_else"))

        loaded = mongo_store.get_one(report_id, user_id)
        assert loaded is not None
        assert mongo_store.get_one(report_id, "someone_else") is None

    def test_get_all_newest_first(self, mongo_store: MongoReportStore, user_id: str) -> None:
        mongo_store.save(_report(f"{user_id}_old", user_id, "2026-01-01T00:00:00+00:00"))
        mongo_store.save(_report(f"{user_id}_new", user_id, "2026-02-01T00:00:00+00:00"))

        assert [r.id for r in mongo_store.get_all(user_id)] == [f"{user_id}_new", f"{user_id}_old"]

    def test_agreement_round_trip(self, mongo_store: MongoReportStore, user_id: str) -> None:
        agreement = PrivacyAgreement(
            id=f"agreement_{user_id}_1",
            user_id=user_id,
            agreement_date="2026-01-15T09:30:00+00:00",
        )
        mongo_store.save_agreement(agreement)

        loaded = mongo_store.get_agreements(user_id)

        assert [a.id for a in loaded] == [agreement.id]
        assert datetime.fromisoformat(loaded[0].agreement_date) == datetime.fromisoformat(
            agreement.agreement_date
        )
