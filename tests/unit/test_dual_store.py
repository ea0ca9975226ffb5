from unittest.mock import MagicMock

import pytest

from complyscan.storage.base import BaseReportStore
from complyscan.storage.dual_store import DualReportStore
from complyscan.storage.exceptions import (
    ReportAlreadyExistsError,
    ReportOwnershipError,
    StoreUnavailableError,
)
from complyscan.storage.models import PrivacyAgreement, Report


def _store(name: str) -> MagicMock:
    store = MagicMock(spec=BaseReportStore)
    store.name = name
    return store


def _report(report_id: str, created_at: str = "2026-01-01T00:00:00+00:00") -> Report:
    return Report(id=report_id, user_id="u1", file_name=f"{report_id}.pdf", created_at=created_at)


class TestSave:
    def test_writes_both_stores(self) -> None:
        primary, backup = _store("a"), _store("b")
        outcome = DualReportStore(primary, backup).save(_report("r1"))
        assert outcome.saved
        assert outcome.primary_saved and outcome.backup_saved
        primary.save.assert_called_once()
        backup.save.assert_called_once()

    def test_primary_failure_still_writes_backup(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.save.side_effect = StoreUnavailableError("down")
        outcome = DualReportStore(primary, backup).save(_report("r1"))
        assert outcome.saved
        assert not outcome.primary_saved
        assert outcome.errors == ("a: down",)

    def test_both_failing_is_not_saved_and_does_not_raise(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.save.side_effect = StoreUnavailableError("down")
        backup.save.side_effect = StoreUnavailableError("also down")
        outcome = DualReportStore(primary, backup).save(_report("r1"))
        assert not outcome.saved
        assert len(outcome.errors) == 2

    def test_backup_agreement_already_exists_counts_as_saved(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.save_agreement.side_effect = StoreUnavailableError("down")
        backup.save_agreement.side_effect = ReportAlreadyExistsError("exists")
        agreement = PrivacyAgreement(id="agreement_u1_1", user_id="u1")
        assert DualReportStore(primary, backup).save_agreement(agreement).saved

    def test_id_owned_by_another_user_is_not_saved(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.save.side_effect = ReportOwnershipError("Report r1 belongs to another user")
        backup.save.side_effect = ReportOwnershipError("Report r1 belongs to another user")
        outcome = DualReportStore(primary, backup).save(_report("r1"))
        assert not outcome.saved
        assert not outcome.backup_saved
        assert outcome.errors == (
            "a: Report r1 belongs to another user",
            "b: Report r1 belongs to another user",
        )

    def test_primary_ownership_conflict_is_a_failure(self) -> None:
        primary = _store("a")
        primary.save.side_effect = ReportOwnershipError("taken")
        assert not DualReportStore(primary).save(_report("r1")).saved

    def test_agreement_written_to_both(self) -> None:
        primary, backup = _store("a"), _store("b")
        agreement = PrivacyAgreement(id="agreement_u1_1", user_id="u1")
        assert DualReportStore(primary, backup).save_agreement(agreement).saved
        primary.save_agreement.assert_called_once_with(agreement)
        backup.save_agreement.assert_called_once_with(agreement)


class TestGetAll:
    def test_primary_failure_served_by_backup(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_all.side_effect = StoreUnavailableError("down")
        backup.get_all.return_value = [_report("r1"), _report("r2")]
        reports = DualReportStore(primary, backup).get_all("u1")
        assert {r.id for r in reports} == {"r1", "r2"}

    def test_merges_with_primary_winning(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary_copy = Report(id="r1", user_id="u1", file_name="primary", created_at="2026-02-01")
        backup_copy = Report(id="r1", user_id="u1", file_name="backup", created_at="2026-02-01")
        primary.get_all.return_value = [primary_copy]
        backup.get_all.return_value = [backup_copy, _report("r2", "2026-03-01")]
        reports = DualReportStore(primary, backup).get_all("u1")
        assert [r.id for r in reports] == ["r2", "r1"]
        assert reports[1].file_name == "primary"

    def test_capped_at_one_hundred(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_all.return_value = [_report(f"p{i}") for i in range(80)]
        backup.get_all.return_value = [_report(f"b{i}") for i in range(80)]
        assert len(DualReportStore(primary, backup).get_all("u1")) == 100

    def test_all_stores_failing_raises(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_all.side_effect = StoreUnavailableError("down")
        backup.get_all.side_effect = StoreUnavailableError("down")
        with pytest.raises(StoreUnavailableError):
            DualReportStore(primary, backup).get_all("u1")


class TestGetOne:
    def test_primary_hit(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_one.return_value = _report("r1")
        assert DualReportStore(primary, backup).get_one("r1", "u1") == _report("r1")
        backup.get_one.assert_not_called()

    def test_primary_miss_checks_backup(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_one.return_value = None
        backup.get_one.return_value = _report("r1")
        assert DualReportStore(primary, backup).get_one("r1", "u1") == _report("r1")

    def test_primary_error_falls_back(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_one.side_effect = StoreUnavailableError("down")
        backup.get_one.return_value = None
        assert DualReportStore(primary, backup).get_one("r1", "u1") is None

    def test_primary_error_without_backup_raises(self) -> None:
        primary = _store("a")
        primary.get_one.side_effect = StoreUnavailableError("down")
        with pytest.raises(StoreUnavailableError):
            DualReportStore(primary).get_one("r1", "u1")


class TestAgreementsAndClose:
    def test_agreements_fall_back_to_backup(self) -> None:
        primary, backup = _store("a"), _store("b")
        primary.get_agreements.side_effect = StoreUnavailableError("down")
        backup.get_agreements.return_value = [PrivacyAgreement(id="x", user_id="u1")]
        assert len(DualReportStore(primary, backup).get_agreements("u1")) == 1

    def test_close_closes_both(self) -> None:
        primary, backup = _store("a"), _store("b")
        DualReportStore(primary, backup).close()
        primary.close.assert_called_once()
        backup.close.assert_called_once()
