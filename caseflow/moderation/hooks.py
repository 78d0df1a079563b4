"""
Content-deletion hooks, one per reportable content type.

A hook deletes the primary content record. Anything that hangs off that
record (a case's comments, likes, saves) is the hook owner's concern and may
be cleaned up asynchronously; the moderation workflow only guarantees the
hook is invoked once per successful removal.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping

from caseflow.constants import CONTENT_COLLECTIONS
from caseflow.models.enums import ContentType
from caseflow.store.base import DocumentStore

DeletionHook = Callable[[str], Awaitable[None]]
DeletionHooks = Mapping[ContentType, DeletionHook]


def delete_from_collection(store: DocumentStore, collection: str) -> DeletionHook:
    """Hook that removes ``content_id`` from ``collection``. Idempotent."""

    async def _delete(content_id: str) -> None:
        await store.delete(collection, content_id)

    _delete.__qualname__ = f"delete_from_collection[{collection}]"
    return _delete


def default_deletion_hooks(store: DocumentStore) -> dict[ContentType, DeletionHook]:
    return {
        content_type: delete_from_collection(store, collection)
        for content_type, collection in CONTENT_COLLECTIONS.items()
    }
