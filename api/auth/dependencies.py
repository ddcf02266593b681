"""
Admin guard for protected routes.

The token is read from `Authorization: Bearer <token>`; older frontends send
it as a bare `x-auth-token` header instead, which is accepted when no
Authorization header is present.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from core.settings import Settings, get_settings

from . import service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _extract_token(authorization: str | None, x_auth_token: str | None = None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        legacy = (x_auth_token or "").strip()
        if legacy:
            return legacy
        raise _unauthorized("Access denied. No token provided.")

    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token.strip()


async def get_admin_token(
    authorization: str | None = Header(default=None),
    x_auth_token: str | None = Header(default=None),
) -> str:
    return _extract_token(authorization, x_auth_token)


async def require_admin(
    access_token: str = Depends(get_admin_token),
    settings: Settings = Depends(get_settings),
) -> dict:
    return service.admin_from_token(access_token, config=settings.admin).model_dump()
