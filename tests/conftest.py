from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from caseflow.config import Settings
from caseflow.constants import CASES, COMMENTS, REPORTED_CONTENT, USERS, VERIFICATION_REQUESTS
from caseflow.main import create_app
from caseflow.moderation.service import ModerationWorkflow
from caseflow.notifications.service import NotificationDispatcher
from caseflow.store import MemoryDocumentStore
from caseflow.verification.service import VerificationWorkflow
from caseflow.workflow.errors import DependencyError

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

TEST_SETTINGS = Settings(
    store_backend="memory",
    jwt_secret="test-secret",
    store_timeout_seconds=5.0,
    cors_origins="http://test",
)


async def seed(store: MemoryDocumentStore) -> None:
    """user1 has a pending request req1; case1 by author1 is reported in rep1."""
    await store.create(
        USERS,
        {
            "display_name": "Dr. Ada Okafor",
            "email": "ada@example.com",
            "title": "MD",
            "specialization": "Cardiology",
            "institution": "St. Mary's",
            "doctor_verification_status": "pending",
            "rejection_reason": None,
        },
        doc_id="user1",
    )
    await store.create(
        USERS,
        {"display_name": "Sam Reporter", "doctor_verification_status": "unverified"},
        doc_id="user2",
    )
    await store.create(
        USERS,
        {"display_name": "Dr. Lee Author", "doctor_verification_status": "verified"},
        doc_id="author1",
    )
    await store.create(
        VERIFICATION_REQUESTS,
        {
            "user_id": "user1",
            "documents": ["licenses/user1.pdf"],
            "status": "pending",
            "submitted_at": T0,
            "reviewed_at": None,
            "reviewer_id": None,
            "rejection_reason": None,
        },
        doc_id="req1",
    )
    await store.create(
        CASES,
        {"title": "Atypical chest pain", "author_id": "author1"},
        doc_id="case1",
    )
    await store.create(
        COMMENTS,
        {"case_id": "case1", "text": "Consider PE.", "user_id": "user2"},
        doc_id="comment1",
    )
    await store.create(
        REPORTED_CONTENT,
        {
            "content_type": "case",
            "content_id": "case1",
            "reported_by": "user2",
            "reason": "Contains identifiable patient data",
            "status": "pending",
            "reported_at": T0,
            "moderated_by": None,
            "moderated_at": None,
        },
        doc_id="rep1",
    )
    await store.create(
        REPORTED_CONTENT,
        {
            "content_type": "comment",
            "content_id": "comment1",
            "reported_by": "author1",
            "reason": "Off topic",
            "status": "pending",
            "reported_at": T0 + timedelta(minutes=5),
            "moderated_by": None,
            "moderated_at": None,
        },
        doc_id="rep2",
    )


@pytest.fixture
def reported_errors() -> list[DependencyError]:
    return []


@pytest_asyncio.fixture
async def store() -> MemoryDocumentStore:
    memory = MemoryDocumentStore()
    await seed(memory)
    return memory


@pytest.fixture
def notifications(store, reported_errors) -> NotificationDispatcher:
    return NotificationDispatcher(store, error_reporter=reported_errors.append)


@pytest.fixture
def verification(store, notifications) -> VerificationWorkflow:
    return VerificationWorkflow(store, notifications)


@pytest.fixture
def moderation(store, notifications) -> ModerationWorkflow:
    return ModerationWorkflow(store, notifications)


def make_token(user_id: str, roles: list[str], secret: str = "test-secret") -> str:
    payload = {
        "sub": user_id,
        "roles": roles,
        "iss": TEST_SETTINGS.jwt_issuer,
        "aud": TEST_SETTINGS.jwt_audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=15),
    }
    return jwt.encode(payload, secret, algorithm=TEST_SETTINGS.jwt_algorithm)


def auth_headers(user_id: str, roles: list[str] | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, roles or ['user'])}"}


@pytest_asyncio.fixture
async def async_client(store, reported_errors) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(TEST_SETTINGS, store=store, error_reporter=reported_errors.append)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth():
    """Build Authorization headers: ``auth("admin1", ["admin"])``."""
    return auth_headers


@pytest.fixture
def seed_documents():
    """The seed routine, for tests that bring their own store backend."""
    return seed
