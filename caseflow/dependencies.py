"""
FastAPI dependencies: settings, the authenticated caller, role guards, and
the workflow components built at startup.

Tokens are issued by the identity collaborator; this service only verifies
them (signature, issuer, audience) and reads ``sub`` and ``roles``.
"""
from __future__ import annotations

from enum import Enum

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field

from caseflow.config import Settings
from caseflow.moderation.service import ModerationWorkflow
from caseflow.notifications.service import NotificationDispatcher
from caseflow.verification.service import VerificationWorkflow

http_bearer = HTTPBearer(auto_error=False)


class Role(str, Enum):
    USER = "user"
    DOCTOR = "doctor"
    STUDENT = "student"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class CurrentUser(BaseModel):
    """User context from JWT."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    email: str = ""
    roles: list[str] = Field(default_factory=list)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _decode_token(token: str, settings: Settings) -> dict:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )


def _payload_to_user(payload: dict) -> CurrentUser:
    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Missing sub in token")
    roles = [str(r) for r in payload.get("roles") or []]
    return CurrentUser(id=str(user_id), email=payload.get("email") or "", roles=roles)


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: Settings = Depends(get_settings),
) -> CurrentUser | None:
    if not credentials or not credentials.credentials:
        return None
    try:
        return _payload_to_user(_decode_token(credentials.credentials, settings))
    except (JWTError, ValueError, KeyError):
        return None


async def get_current_user(
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Raise 403 unless the authenticated user holds the ADMIN or SUPER_ADMIN role."""
    allowed = {Role.ADMIN.value, Role.SUPER_ADMIN.value}
    if not any(r in allowed for r in current_user.roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user


# ── Workflow components (built once in create_app) ───────────────────────────

def get_notifications(request: Request) -> NotificationDispatcher:
    return request.app.state.notifications


def get_verification_workflow(request: Request) -> VerificationWorkflow:
    return request.app.state.verification


def get_moderation_workflow(request: Request) -> ModerationWorkflow:
    return request.app.state.moderation
