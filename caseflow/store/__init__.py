from caseflow.config import Settings
from caseflow.store.base import (
    Document,
    DocumentExists,
    DocumentNotFound,
    DocumentStore,
    PreconditionFailed,
    StoreError,
    WriteBatch,
)
from caseflow.store.memory import MemoryDocumentStore

__all__ = [
    "Document",
    "DocumentExists",
    "DocumentNotFound",
    "DocumentStore",
    "MemoryDocumentStore",
    "PreconditionFailed",
    "StoreError",
    "WriteBatch",
    "create_store",
]


def create_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "sql":
        # Imported lazily so the memory backend never needs a database driver.
        from caseflow.database import get_async_engine
        from caseflow.store.sql import SqlDocumentStore

        return SqlDocumentStore(
            get_async_engine(
                settings.database_url,
                ssl_mode=settings.database_ssl,
                ssl_ca_file=settings.database_ssl_ca_file,
                echo=settings.database_echo,
            )
        )
    return MemoryDocumentStore()
