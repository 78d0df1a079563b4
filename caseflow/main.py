import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from caseflow.config import Settings
from caseflow.middleware import error_envelope_middleware, http_exception_handler, request_id_middleware
from caseflow.moderation.admin_router import router as moderation_admin_router
from caseflow.moderation.hooks import DeletionHooks
from caseflow.moderation.router import router as reports_router
from caseflow.moderation.service import ModerationWorkflow
from caseflow.notifications.router import router as notifications_router
from caseflow.notifications.service import NotificationDispatcher
from caseflow.store import DocumentStore, create_store
from caseflow.verification.admin_router import router as verification_admin_router
from caseflow.verification.router import router as verification_router
from caseflow.verification.service import VerificationWorkflow
from caseflow.workflow.runtime import ErrorReporter, log_dependency_error

logger = logging.getLogger(__name__)

# Swagger tag groups displayed in the OpenAPI docs sidebar
_OPENAPI_TAGS = [
    {
        "name": "admin-verification",
        "description": (
            "Doctor credential review. Approve or reject PENDING requests; the "
            "requester's profile status is updated in the same write."
        ),
    },
    {
        "name": "admin-moderation",
        "description": (
            "Content report queue. Reports are marked reviewed or the reported "
            "case, comment or profile is removed."
        ),
    },
    {"name": "verification", "description": "Submit credentials for doctor verification."},
    {"name": "reports", "description": "Flag content for moderator review."},
    {"name": "Notifications", "description": "In-app notifications for the current user."},
    {"name": "Health", "description": "Liveness probe."},
]


def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: DocumentStore = app.state.store
    await store.startup()
    logger.info("Store ready (%s)", type(store).__name__)
    yield
    await store.close()


def create_app(
    settings: Settings | None = None,
    *,
    store: DocumentStore | None = None,
    deletion_hooks: DeletionHooks | None = None,
    error_reporter: ErrorReporter = log_dependency_error,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(), format="%(levelname)s:%(name)s: %(message)s"
    )
    app = FastAPI(
        title="Caseflow Workflow Service",
        description=(
            "Admin workflows for a clinical case-sharing platform: doctor "
            "verification, content moderation, and the notifications both emit."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=_OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Components are built eagerly so that routes work even when the ASGI
    # server does not run the lifespan (e.g. httpx.ASGITransport in tests).
    store = store or create_store(settings)
    notifications = NotificationDispatcher(store, error_reporter=error_reporter)
    app.state.settings = settings
    app.state.store = store
    app.state.notifications = notifications
    app.state.verification = VerificationWorkflow(
        store, notifications, timeout=settings.store_timeout_seconds
    )
    app.state.moderation = ModerationWorkflow(
        store,
        notifications,
        deletion_hooks=deletion_hooks,
        timeout=settings.store_timeout_seconds,
    )

    # CORS must be registered first (runs last in middleware stack)
    # so that preflight OPTIONS requests get CORS headers before any auth check.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(verification_router, prefix="/api/v1")
    app.include_router(verification_admin_router, prefix="/api/v1")
    app.include_router(reports_router, prefix="/api/v1")
    app.include_router(moderation_admin_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        """Lightweight liveness probe. Does not hit the store."""
        return {"status": "ok", "service": "caseflow", "store": settings.store_backend}

    return app


app = create_app()
