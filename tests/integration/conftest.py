import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from complyscan.config.settings import Settings
from complyscan.database.connection import apply_schema, close_pool, get_connection, init_pool
from complyscan.storage.mongo_store import MongoReportStore
from complyscan.storage.postgres_store import PostgresReportStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "complyscan_test")
    os.environ.setdefault("MONGO_DATABASE", "complyscan_test")
    os.environ.setdefault("DB_CONNECT_TIMEOUT_SECONDS", "2")
    os.environ.setdefault("MONGO_TIMEOUT_MS", "2000")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    init_pool(test_settings)
    try:
        apply_schema()
    except psycopg.Error as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. Set DB_* env to point at a test database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture(scope="session")
def mongo_client(test_settings: Settings) -> Generator[MongoClient[dict[str, Any]], None, None]:
    client: MongoClient[dict[str, Any]] = MongoClient(
        test_settings.mongo_uri,
        serverSelectionTimeoutMS=test_settings.mongo_timeout_ms,
        tz_aware=True,
    )
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        pytest.skip(f"MongoDB test instance not available: {e}. Set MONGO_URI")
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def user_id() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


@pytest.fixture
def postgres_store(integration_pool: None, user_id: str) -> Generator[PostgresReportStore, None, None]:
    yield PostgresReportStore()
    with get_connection() as conn:
        conn.execute("DELETE FROM reports WHERE user_id = %s", (user_id,))
        conn.execute("DELETE FROM privacy_agreements WHERE user_id = %s", (user_id,))
        conn.commit()


@pytest.fixture
def mongo_store(
    mongo_client: MongoClient[dict[str, Any]], test_settings: Settings, user_id: str
) -> Generator[MongoReportStore, None, None]:
    yield MongoReportStore(mongo_client, test_settings.mongo_database)
    db = mongo_client[test_settings.mongo_database]
    db["reports"].delete_many({"userId": user_id})
    db["privacy_agreements"].delete_many({"userId": user_id})
