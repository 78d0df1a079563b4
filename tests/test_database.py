import ssl

import pytest

from caseflow import database
from caseflow.config import Settings
from caseflow.store import create_store
from caseflow.store.sql import SqlDocumentStore

POSTGRES_URL = "postgresql+asyncpg://caseflow:secret@db:5432/caseflow_db"


@pytest.fixture
def engine_calls(monkeypatch) -> list[tuple[str, dict]]:
    calls: list[tuple[str, dict]] = []

    def fake_create_async_engine(url, **kwargs):
        calls.append((url, kwargs))
        return object()

    monkeypatch.setattr(database, "create_async_engine", fake_create_async_engine)
    return calls


def test_ssl_disabled_adds_no_connect_args() -> None:
    assert database.ssl_connect_args("disable") == {}


def test_ssl_require_encrypts_without_verification() -> None:
    assert database.ssl_connect_args("require") == {"ssl": "require"}


def test_ssl_verify_builds_a_verifying_context() -> None:
    args = database.ssl_connect_args("verify")
    assert isinstance(args["ssl"], ssl.SSLContext)
    assert args["ssl"].verify_mode == ssl.CERT_REQUIRED


def test_postgres_engine_gets_ssl_and_pre_ping(engine_calls) -> None:
    database.get_async_engine(POSTGRES_URL, ssl_mode="require", echo=True)

    (url, kwargs), = engine_calls
    assert url == POSTGRES_URL
    assert kwargs["connect_args"] == {"ssl": "require"}
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["echo"] is True


def test_explicit_connect_args_are_merged(engine_calls) -> None:
    database.get_async_engine(
        POSTGRES_URL, ssl_mode="require", connect_args={"timeout": 5}
    )
    (_, kwargs), = engine_calls
    assert kwargs["connect_args"] == {"ssl": "require", "timeout": 5}


def test_sqlite_engine_ignores_ssl(engine_calls) -> None:
    database.get_async_engine("sqlite+aiosqlite://", ssl_mode="verify")
    (_, kwargs), = engine_calls
    assert kwargs == {}


def test_create_store_reads_ssl_from_settings(engine_calls) -> None:
    settings = Settings(
        store_backend="sql",
        database_url=POSTGRES_URL,
        database_ssl="require",
        database_echo=False,
    )
    store = create_store(settings)

    assert isinstance(store, SqlDocumentStore)
    (_, kwargs), = engine_calls
    assert kwargs["connect_args"] == {"ssl": "require"}
