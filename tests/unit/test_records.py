from datetime import datetime, timezone

from complyscan.storage.models import Report
from complyscan.storage.records import (
    agreement_from_record,
    report_from_record,
    sort_newest_first,
    to_iso,
)


class TestToIso:
    def test_aware_datetime(self) -> None:
        value = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert to_iso(value) == "2026-03-01T12:00:00+00:00"

    def test_naive_datetime_assumed_utc(self) -> None:
        assert to_iso(datetime(2026, 3, 1)) == "2026-03-01T00:00:00+00:00"

    def test_epoch_seconds_and_millis_agree(self) -> None:
        assert to_iso(1_700_000_000) == to_iso(1_700_000_000_000)

    def test_timestamp_dict(self) -> None:
        assert to_iso({"_seconds": 0, "_nanoseconds": 0}) == "1970-01-01T00:00:00+00:00"

    def test_iso_string_is_canonicalized(self) -> None:
        assert to_iso("2026-01-01T00:00:00Z") == "2026-01-01T00:00:00+00:00"
        assert to_iso("2026-01-01 08:30:00") == "2026-01-01T08:30:00+00:00"

    def test_unreadable_string_is_dropped(self) -> None:
        assert to_iso("Mon Jan 01 2026") == ""

    def test_empty_values(self) -> None:
        assert to_iso(None) == ""
        assert to_iso("") == ""
        assert to_iso({"other": 1}) == ""


class TestReportFromRecord:
    def test_snake_case_row(self) -> None:
        report = report_from_record(
            {
                "id": "r1",
                "user_id": "u1",
                "file_name": "handbook.pdf",
                "file_url": "https://x/handbook.pdf",
                "analysis": {"summary": "ok"},
                "created_at": datetime(2026, 1, 2, tzinfo=timezone.utc),
            }
        )
        assert report == Report(
            id="r1",
            user_id="u1",
            file_name="handbook.pdf",
            file_url="https://x/handbook.pdf",
            analysis={"summary": "ok"},
            created_at="2026-01-02T00:00:00+00:00",
        )

    def test_camel_case_document(self) -> None:
        report = report_from_record(
            {"_id": "abc", "userId": "u2", "fileName": "a.png", "createdAt": 1_700_000_000}
        )
        assert report.id == "abc"
        assert report.user_id == "u2"
        assert report.analysis == {}
        assert report.created_at.startswith("2023-11-14")

    def test_missing_file_name_falls_back_to_id(self) -> None:
        report = report_from_record({"id": "0123456789abcdef", "user_id": "u"})
        assert report.file_name == "Report 01234567"


class TestAgreementFromRecord:
    def test_reads_both_casings(self) -> None:
        agreement = agreement_from_record(
            {"_id": "agreement_u_1", "userId": "u", "dontShowAgain": True, "agreed": False}
        )
        assert agreement.id == "agreement_u_1"
        assert agreement.dont_show_again is True
        assert agreement.agreed is False
        assert agreement.agreement_version == "2.0"


class TestSortNewestFirst:
    def test_orders_by_created_at(self) -> None:
        reports = [
            Report(id="a", user_id="u", file_name="a", created_at="2026-01-01T00:00:00+00:00"),
            Report(id="b", user_id="u", file_name="b", created_at="2026-03-01T00:00:00+00:00"),
            Report(id="c", user_id="u", file_name="c", created_at="2026-02-01T00:00:00+00:00"),
        ]
        assert [r.id for r in sort_newest_first(reports)] == ["b", "c", "a"]
