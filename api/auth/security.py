"""
Auth security helpers.
"""

from __future__ import annotations

import hmac
import time
from typing import Any

import bcrypt
import jwt

from core.settings import AdminConfig

ADMIN_ROLE = "admin"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def verify_admin_credentials(username: str, password: str, config: AdminConfig) -> bool:
    """
    Check a login against the configured admin account.

    A bcrypt `password_hash` wins over the plain `password` when both are set.
    """
    username_ok = hmac.compare_digest(
        (username or "").encode("utf-8"),
        config.username.encode("utf-8"),
    )
    if config.password_hash:
        password_ok = verify_password(password, config.password_hash)
    else:
        password_ok = hmac.compare_digest(
            (password or "").encode("utf-8"),
            config.password.encode("utf-8"),
        )
    return username_ok and password_ok


def build_admin_token(*, username: str, config: AdminConfig) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (config.token_expire_hours * 3600)

    payload = {
        "sub": username,
        "role": ADMIN_ROLE,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_admin_token(token: str, config: AdminConfig) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload
