from datetime import datetime, timedelta, timezone

import pytest

from caseflow.constants import NOTIFICATIONS
from caseflow.models.enums import NotificationType
from caseflow.notifications.service import NotificationDispatcher
from caseflow.store import MemoryDocumentStore
from caseflow.workflow.errors import DependencyError, NotFoundError

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


async def _seed_feed(store) -> None:
    for i, read in enumerate([True, False, False]):
        await store.create(
            NOTIFICATIONS,
            {
                "user_id": "user1",
                "type": "system",
                "title": f"Notice {i}",
                "message": "...",
                "read": read,
                "created_at": T0 + timedelta(hours=i),
                "data": None,
            },
            doc_id=f"n{i}",
        )
    await store.create(
        NOTIFICATIONS,
        {
            "user_id": "user2",
            "type": "like",
            "title": "Someone liked your case",
            "message": "...",
            "read": False,
            "created_at": T0,
        },
        doc_id="other",
    )


@pytest.mark.asyncio
async def test_create_persists_unread_notification(notifications, store) -> None:
    created = await notifications.create(
        "user1", NotificationType.SYSTEM, "Welcome", "Hello", {"source": "onboarding"}
    )

    assert created.read is False
    assert created.created_at is not None
    stored = await store.get(NOTIFICATIONS, created.id)
    assert stored.data["type"] == "system"
    assert stored.data["data"] == {"source": "onboarding"}


@pytest.mark.asyncio
async def test_feed_is_newest_first_and_scoped_to_user(notifications, store) -> None:
    await _seed_feed(store)

    feed = notifications.get_for_user("user1")
    assert [n.id async for n in feed] == ["n2", "n1", "n0"]


@pytest.mark.asyncio
async def test_feed_is_restartable(notifications, store) -> None:
    await _seed_feed(store)
    feed = notifications.get_for_user("user1")

    first = [n.id async for n in feed]
    await notifications.create("user1", NotificationType.SYSTEM, "Later", "...")
    second = [n.id async for n in feed]

    assert len(first) == 3
    assert len(second) == 4
    assert second[1:] == first


@pytest.mark.asyncio
async def test_only_unread_feed(notifications, store) -> None:
    await _seed_feed(store)
    unread = await notifications.get_for_user("user1", only_unread=True).all()
    assert [n.id for n in unread] == ["n2", "n1"]


@pytest.mark.asyncio
async def test_mark_read_twice_is_noop(notifications, store) -> None:
    await _seed_feed(store)

    first = await notifications.mark_read("n1")
    version_after_first = (await store.get(NOTIFICATIONS, "n1")).version
    second = await notifications.mark_read("n1")

    assert first.read is True
    assert second.read is True
    assert (await store.get(NOTIFICATIONS, "n1")).version == version_after_first


@pytest.mark.asyncio
async def test_mark_read_unknown_id(notifications) -> None:
    with pytest.raises(NotFoundError):
        await notifications.mark_read("nope")


@pytest.mark.asyncio
async def test_unread_count_and_mark_all_read(notifications, store) -> None:
    await _seed_feed(store)

    assert await notifications.unread_count("user1") == 2
    assert await notifications.mark_all_read("user1") == 2
    assert await notifications.unread_count("user1") == 0
    assert await notifications.mark_all_read("user1") == 0
    # Other users are untouched.
    assert await notifications.unread_count("user2") == 1


@pytest.mark.asyncio
async def test_dispatch_reports_store_failure() -> None:
    class FailingStore(MemoryDocumentStore):
        async def apply(self, ops):
            raise ConnectionError("store offline")

    reported: list[DependencyError] = []
    dispatcher = NotificationDispatcher(FailingStore(), error_reporter=reported.append)

    result = await dispatcher.dispatch("user1", NotificationType.SYSTEM, "Hi", "...")

    assert result is None
    assert len(reported) == 1
    assert reported[0].code == "dependency_error"
    assert isinstance(reported[0].__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_dispatch_survives_broken_reporter(caplog) -> None:
    class FailingStore(MemoryDocumentStore):
        async def apply(self, ops):
            raise ConnectionError("store offline")

    def broken_reporter(error: DependencyError) -> None:
        raise RuntimeError("reporter down")

    dispatcher = NotificationDispatcher(FailingStore(), error_reporter=broken_reporter)
    with caplog.at_level("ERROR"):
        assert await dispatcher.dispatch("user1", NotificationType.SYSTEM, "Hi", "...") is None
    assert "Error reporter failed" in caplog.text


@pytest.mark.asyncio
async def test_default_reporter_logs(caplog) -> None:
    class FailingStore(MemoryDocumentStore):
        async def apply(self, ops):
            raise ConnectionError("store offline")

    dispatcher = NotificationDispatcher(FailingStore())
    with caplog.at_level("ERROR", logger="caseflow.workflow.runtime"):
        await dispatcher.dispatch("user1", NotificationType.SYSTEM, "Hi", "...")
    assert "Side effect failed (notifications)" in caplog.text
