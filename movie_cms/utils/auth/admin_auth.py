"""
Admin credential gate.

There is exactly one admin identity, taken from configuration. A successful
login issues a signed session token which the browser keeps in an httpOnly
cookie; admin-only routes depend on `get_current_admin`.
"""

import hmac
import logging
from typing import Optional

from fastapi import Request, Response

from movie_cms.utils.auth.jwt_handler import create_access_token, verify_access_token
from movie_cms.utils.config import settings
from movie_cms.utils.exceptions import AuthError, ForbiddenError, ValidationError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def authenticate_admin(email: Optional[str], password: Optional[str]) -> str:
    """Check the submitted credentials and return a session token."""
    if not email or not password:
        raise ValidationError("Email and password required")

    # Both comparisons always run so timing does not reveal which one failed.
    email_ok = _matches(email, settings.ADMIN_EMAIL)
    password_ok = _matches(password, settings.ADMIN_PASSWORD)
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD or not (email_ok and password_ok):
        logger.warning("admin.login.failed email=%s", email)
        raise AuthError("Invalid admin credentials")

    logger.info("admin.login email=%s", email)
    return create_access_token({"role": ADMIN_ROLE, "email": email})


def verify_admin_token(token: Optional[str]) -> dict:
    if not token:
        raise AuthError("Admin token missing")

    payload = verify_access_token(token)
    if payload.get("role") != ADMIN_ROLE:
        raise ForbiddenError("Admin access only")
    return {"role": payload.get("role"), "email": payload.get("email")}


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def get_current_admin(request: Request) -> dict:
    """FastAPI dependency: the decoded admin identity from the session cookie."""
    return verify_admin_token(request.cookies.get(settings.ADMIN_COOKIE_NAME))
