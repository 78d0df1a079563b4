import ssl
from typing import Any, Literal

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

AsyncSessionFactory = async_sessionmaker[AsyncSession]

SslMode = Literal["disable", "require", "verify"]


def ssl_connect_args(mode: SslMode, ca_file: str | None = None) -> dict[str, Any]:
    """asyncpg ``connect_args`` for the configured SSL mode.

    ``require`` encrypts without checking the server certificate; ``verify``
    checks it against ``ca_file`` (or the system trust store when unset).
    """
    if mode == "disable":
        return {}
    if mode == "verify":
        return {"ssl": ssl.create_default_context(cafile=ca_file)}
    return {"ssl": "require"}


def get_async_engine(
    database_url: str,
    *,
    ssl_mode: SslMode = "disable",
    ssl_ca_file: str | None = None,
    **kwargs: Any,
) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # Local files and in-memory databases: no SSL and no server pool.
        return create_async_engine(database_url, **kwargs)
    connect_args = {
        **ssl_connect_args(ssl_mode, ssl_ca_file),
        **kwargs.pop("connect_args", {}),
    }
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(database_url, connect_args=connect_args, **kwargs)


def create_session_factory(engine: AsyncEngine) -> AsyncSessionFactory:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
