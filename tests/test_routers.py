import pytest

from caseflow.constants import CASES, NOTIFICATIONS, USERS


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert "X-Request-ID" in resp.headers


@pytest.mark.asyncio
async def test_admin_routes_require_token(async_client) -> None:
    resp = await async_client.get("/api/v1/admin/verification/queue")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_admin_routes_require_admin_role(async_client, auth) -> None:
    resp = await async_client.get(
        "/api/v1/admin/verification/queue", headers=auth("user1", ["user"])
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_token_with_wrong_audience_is_rejected(async_client) -> None:
    from jose import jwt

    token = jwt.encode(
        {"sub": "admin1", "roles": ["admin"], "iss": "caseflow-identity", "aud": "someone-else"},
        "test-secret",
        algorithm="HS256",
    )
    resp = await async_client.get(
        "/api/v1/admin/verification/queue", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_verification_queue_includes_user(async_client, auth) -> None:
    resp = await async_client.get(
        "/api/v1/admin/verification/queue", headers=auth("admin1", ["admin"])
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["id"] == "req1"
    assert body["items"][0]["user"]["display_name"] == "Dr. Ada Okafor"
    assert body["items"][0]["submitted_at"] == "2024-03-01T09:00:00.000000+00:00"


@pytest.mark.asyncio
async def test_review_approve(async_client, auth, store) -> None:
    resp = await async_client.patch(
        "/api/v1/admin/verification/req1/review",
        json={"action": "APPROVE"},
        headers=auth("admin1", ["super_admin"]),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
    assert resp.json()["reviewer_id"] == "admin1"
    assert (await store.get(USERS, "user1")).data["doctor_verification_status"] == "verified"


@pytest.mark.asyncio
async def test_review_twice_is_conflict(async_client, auth) -> None:
    headers = auth("admin1", ["admin"])
    await async_client.patch(
        "/api/v1/admin/verification/req1/review", json={"action": "APPROVE"}, headers=headers
    )
    resp = await async_client.patch(
        "/api/v1/admin/verification/req1/review", json={"action": "APPROVE"}, headers=headers
    )
    assert resp.status_code == 409
    body = resp.json()
    assert body["error"]["code"] == "invalid_state"
    assert body["request_id"]


@pytest.mark.asyncio
async def test_reject_without_reason_is_validation_error(async_client, auth) -> None:
    resp = await async_client.patch(
        "/api/v1/admin/verification/req1/review",
        json={"action": "REJECT", "reason": "   "},
        headers=auth("admin1", ["admin"]),
    )
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "validation_error"
    assert error["field"] == "reason"


@pytest.mark.asyncio
async def test_unknown_request_is_404(async_client, auth) -> None:
    resp = await async_client.get(
        "/api/v1/admin/verification/missing", headers=auth("admin1", ["admin"])
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_moderation_remove(async_client, auth, store) -> None:
    headers = auth("mod1", ["admin"])
    queue = await async_client.get("/api/v1/admin/moderation/queue", headers=headers)
    assert [r["id"] for r in queue.json()["items"]] == ["rep1", "rep2"]

    resp = await async_client.patch(
        "/api/v1/admin/moderation/rep1", json={"action": "removed"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "removed"
    assert await store.get(CASES, "case1") is None


@pytest.mark.asyncio
async def test_moderation_rejects_unknown_action(async_client, auth) -> None:
    resp = await async_client.patch(
        "/api/v1/admin/moderation/rep1", json={"action": "banned"}, headers=auth("mod1", ["admin"])
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_user_reports_content(async_client, auth) -> None:
    resp = await async_client.post(
        "/api/v1/reports",
        json={"content_type": "comment", "content_id": "comment1", "reason": "Spam"},
        headers=auth("user1"),
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"
    assert resp.json()["reported_by"] == "user1"


@pytest.mark.asyncio
async def test_user_submits_verification(async_client, auth) -> None:
    resp = await async_client.post(
        "/api/v1/verification", json={"documents": ["licenses/user2.pdf"]}, headers=auth("user2")
    )
    assert resp.status_code == 201
    assert resp.json()["user_id"] == "user2"

    again = await async_client.post(
        "/api/v1/verification", json={"documents": ["licenses/user2.pdf"]}, headers=auth("user2")
    )
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_notifications_flow(async_client, auth, store) -> None:
    await async_client.patch(
        "/api/v1/admin/verification/req1/review",
        json={"action": "REJECT", "reason": "Invalid documents"},
        headers=auth("admin1", ["admin"]),
    )
    headers = auth("user1")

    listing = await async_client.get("/api/v1/notifications", headers=headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["unread"] == 1
    notification_id = body["items"][0]["id"]
    assert body["items"][0]["type"] == "verification"

    count = await async_client.get("/api/v1/notifications/unread-count", headers=headers)
    assert count.json() == {"count": 1}

    for _ in range(2):
        resp = await async_client.post(
            f"/api/v1/notifications/{notification_id}/read", headers=headers
        )
        assert resp.status_code == 204
    assert (await store.get(NOTIFICATIONS, notification_id)).data["read"] is True

    unread_only = await async_client.get(
        "/api/v1/notifications", params={"only_unread": "true"}, headers=headers
    )
    assert unread_only.json()["items"] == []


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses_notification(async_client, auth, notifications) -> None:
    from caseflow.models.enums import NotificationType

    notification = await notifications.create("user1", NotificationType.SYSTEM, "Hi", "...")
    resp = await async_client.post(
        f"/api/v1/notifications/{notification.id}/read", headers=auth("user2")
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_mark_all_read(async_client, auth, notifications) -> None:
    from caseflow.models.enums import NotificationType

    for title in ("one", "two"):
        await notifications.create("user1", NotificationType.SYSTEM, title, "...")
    resp = await async_client.post("/api/v1/notifications/mark-all-read", headers=auth("user1"))
    assert resp.json() == {"updated": 2}
