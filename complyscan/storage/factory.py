from typing import Any

from pymongo import MongoClient

from complyscan.config.settings import Settings
from complyscan.storage.dual_store import DualReportStore
from complyscan.storage.mongo_store import MongoReportStore
from complyscan.storage.postgres_store import PostgresReportStore


class ReportStoreFactory:
    """Creates the store composition selected by ``report_store``."""

    MODES = ("dual", "postgres", "mongo")

    @classmethod
    def create(cls, settings: Settings) -> DualReportStore:
        mode = settings.report_store.lower()
        if mode == "dual":
            return DualReportStore(PostgresReportStore(), cls.create_mongo_store(settings))
        if mode == "postgres":
            return DualReportStore(PostgresReportStore())
        if mode == "mongo":
            return DualReportStore(cls.create_mongo_store(settings))
        raise ValueError(f"Unknown report store '{mode}'. Choose from: {list(cls.MODES)}")

    @staticmethod
    def uses_postgres(settings: Settings) -> bool:
        return settings.report_store.lower() in ("dual", "postgres")

    @staticmethod
    def create_mongo_store(settings: Settings) -> MongoReportStore:
        client: MongoClient[dict[str, Any]] = MongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            tz_aware=True,
        )
        return MongoReportStore(client, settings.mongo_database)
