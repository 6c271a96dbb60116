"""CSRF guard for state-changing requests"""

import secrets

from fastapi import HTTPException, Request, Response, status
import structlog

from sucurries.config import settings

logger = structlog.get_logger()

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def issue_csrf_token(response: Response) -> str:
    """Generate a token and set it as a cookie on the response"""
    token = secrets.token_urlsafe(32)
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=token,
        httponly=False,
        samesite="strict",
        secure=settings.environment.lower() == "production",
    )
    return token


async def verify_csrf(request: Request) -> None:
    """
    Double-submit check: the X-CSRF-Token header must match the csrf cookie.
    Safe methods and the development environment are exempt.
    """
    if request.method in SAFE_METHODS:
        return

    if settings.is_development:
        return

    header_token = request.headers.get(settings.csrf_header_name)
    cookie_token = request.cookies.get(settings.csrf_cookie_name)

    if not header_token or not cookie_token or not secrets.compare_digest(header_token, cookie_token):
        logger.warning("CSRF check failed", method=request.method, path=request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid CSRF token")
