from dataclasses import dataclass

import psycopg

from complyscan.accounts.factory import AccountServiceFactory
from complyscan.accounts.service import AccountService
from complyscan.analysis.factory import AnalyzerFactory
from complyscan.config.settings import Settings
from complyscan.database.connection import apply_schema, close_pool, init_pool
from complyscan.logging.logger import Log
from complyscan.ocr.factory import TextExtractorFactory
from complyscan.ocr.sources import RemoteFileFetcher
from complyscan.pipeline.orchestrator import AnalyzeOrchestrator
from complyscan.reporting.pdf_report import ReportRenderer
from complyscan.storage.dual_store import DualReportStore
from complyscan.storage.factory import ReportStoreFactory


@dataclass
class Services:
    """Long-lived collaborators shared by all request handlers."""

    settings: Settings
    accounts: AccountService
    store: DualReportStore
    orchestrator: AnalyzeOrchestrator
    renderer: ReportRenderer

    def close(self) -> None:
        self.store.close()


def build_services(settings: Settings) -> Services:
    """Build all adapters from settings. Opens the PostgreSQL pool if it is used."""
    if ReportStoreFactory.uses_postgres(settings):
        init_pool(settings)
        if settings.db_apply_schema:
            try:
                apply_schema()
            except psycopg.Error as exc:
                Log.warning(f"Could not apply PostgreSQL schema, continuing: {exc}")

    accounts = AccountServiceFactory.create(settings)
    store = ReportStoreFactory.create(settings)
    orchestrator = AnalyzeOrchestrator(
        accounts=accounts,
        extractor=TextExtractorFactory.create(settings),
        analyzer=AnalyzerFactory.create(settings),
        store=store,
    )
    renderer = ReportRenderer(
        RemoteFileFetcher(
            timeout_seconds=settings.remote_file_timeout_seconds,
            max_bytes=settings.max_upload_bytes,
        )
    )
    Log.info(
        f"Services ready (store={settings.report_store}, ocr={settings.ocr_provider}, "
        f"analysis={settings.analysis_provider})"
    )
    return Services(
        settings=settings,
        accounts=accounts,
        store=store,
        orchestrator=orchestrator,
        renderer=renderer,
    )


def shutdown_services(services: Services) -> None:
    services.close()
    if ReportStoreFactory.uses_postgres(services.settings):
        close_pool()
    Log.info("Services closed")
