from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from complyscan.database.connection import get_connection
from complyscan.storage.base import MAX_REPORTS, BaseReportStore
from complyscan.storage.exceptions import ReportOwnershipError, StoreUnavailableError
from complyscan.storage.models import PrivacyAgreement, Report
from complyscan.storage.records import agreement_from_record, report_from_record

ConnectionFactory = Callable[[], AbstractContextManager[psycopg.Connection[Any]]]

_REPORT_COLUMNS = "id, user_id, file_name, file_url, analysis, created_at"
_AGREEMENT_COLUMNS = (
    "id, user_id, user_email, agreed, agreement_date, dont_show_again, "
    "ip_address, user_agent, agreement_text, agreement_version, created_at"
)


class PostgresReportStore(BaseReportStore):
    """Store A: reports and agreements in PostgreSQL with JSONB analysis payloads."""

    name = "postgres"

    def __init__(self, connection_factory: ConnectionFactory = get_connection) -> None:
        self._connection = connection_factory

    def save(self, report: Report) -> None:
        """Upsert by id. Conflicting ids owned by another user are not overwritten.

        Raises:
            ReportOwnershipError: if the id belongs to another user.
            StoreUnavailableError: on any database error.
        """
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO reports (id, user_id, file_name, file_url, analysis, created_at)
                VALUES (%s, %s, %s, %s, %s, COALESCE(%s::timestamptz, now()))
                ON CONFLICT (id) DO UPDATE
                SET file_name = EXCLUDED.file_name,
                    file_url = EXCLUDED.file_url,
                    analysis = EXCLUDED.analysis
                WHERE reports.user_id = EXCLUDED.user_id
                """,
                (
                    report.id,
                    report.user_id,
                    report.file_name,
                    report.file_url,
                    Jsonb(report.analysis),
                    report.created_at or None,
                ),
            )
            if cur.rowcount == 0:
                raise ReportOwnershipError(f"Report {report.id} belongs to another user")

    def get_all(self, user_id: str) -> list[Report]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_REPORT_COLUMNS}
                FROM reports
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, MAX_REPORTS),
            )
            rows = cur.fetchall()
        return [report_from_record(row) for row in rows]

    def get_one(self, report_id: str, user_id: str) -> Report | None:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_REPORT_COLUMNS} FROM reports WHERE id = %s AND user_id = %s",
                (report_id, user_id),
            )
            row = cur.fetchone()
        return report_from_record(row) if row is not None else None

    def save_agreement(self, agreement: PrivacyAgreement) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO privacy_agreements (
                    id, user_id, user_email, agreed, agreement_date, dont_show_again,
                    ip_address, user_agent, agreement_text, agreement_version, created_at
                )
                VALUES (%s, %s, %s, %s, %s::timestamptz, %s, %s, %s, %s, %s,
                        COALESCE(%s::timestamptz, now()))
                ON CONFLICT (id) DO UPDATE
                SET agreed = EXCLUDED.agreed,
                    dont_show_again = EXCLUDED.dont_show_again
                """,
                (
                    agreement.id,
                    agreement.user_id,
                    agreement.user_email,
                    agreement.agreed,
                    agreement.agreement_date or None,
                    agreement.dont_show_again,
                    agreement.ip_address,
                    agreement.user_agent,
                    agreement.agreement_text,
                    agreement.agreement_version,
                    agreement.created_at or None,
                ),
            )

    def get_agreements(self, user_id: str) -> list[PrivacyAgreement]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_AGREEMENT_COLUMNS}
                FROM privacy_agreements
                WHERE user_id = %s
                ORDER BY created_at DESC
                """,
                (user_id,),
            )
            rows = cur.fetchall()
        return [agreement_from_record(row) for row in rows]

    @contextmanager
    def _cursor(self) -> Generator[psycopg.Cursor[dict[str, Any]], None, None]:
        """Dict-row cursor on a pooled connection, committed on success."""
        try:
            with self._connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    yield cur
                conn.commit()
        except psycopg.Error as exc:
            raise StoreUnavailableError(f"PostgreSQL error: {exc}") from exc
        except RuntimeError as exc:
            raise StoreUnavailableError(f"PostgreSQL unavailable: {exc}") from exc
