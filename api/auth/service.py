"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.settings import AdminConfig

from . import schemas, security

logger = logging.getLogger(__name__)


def login(payload: schemas.LoginRequest, *, config: AdminConfig) -> schemas.LoginResponse:
    if not security.verify_admin_credentials(payload.username, payload.password, config):
        logger.warning("admin_login_rejected username=%s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = security.build_admin_token(username=config.username, config=config)
    logger.info("admin_login username=%s", config.username)
    return schemas.LoginResponse(
        token=token,
        expires_in=f"{config.token_expire_hours}h",
    )


def admin_from_token(access_token: str, *, config: AdminConfig) -> schemas.AdminIdentity:
    try:
        payload = security.decode_admin_token(access_token, config)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    if str(payload.get("role") or "") != security.ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject.",
        )
    return schemas.AdminIdentity(username=subject, role=security.ADMIN_ROLE)
