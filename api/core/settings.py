"""
Process-wide settings read from the environment.

Everything is resolved once (see `get_settings`) and handed to the pieces
that need it, e.g. `MediaStore(settings.media)`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_CORS_ORIGINS = ("http://localhost:3001", "http://localhost:5173")


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class MediaStoreConfig:
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str = "portfolio"
    api_base_url: str = "https://api.cloudinary.com/v1_1"
    timeout_s: float = 60.0


@dataclass(frozen=True)
class AdminConfig:
    username: str = "admin"
    password: str = "admin123"
    # bcrypt hash; takes precedence over the plain password when set.
    password_hash: str = ""
    jwt_secret: str = "dev-change-this-secret"
    jwt_algorithm: str = "HS256"
    token_expire_hours: int = 24


@dataclass(frozen=True)
class Settings:
    media: MediaStoreConfig = field(default_factory=MediaStoreConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"


def load_settings() -> Settings:
    media = MediaStoreConfig(
        cloud_name=_env_str("CLOUDINARY_CLOUD_NAME"),
        api_key=_env_str("CLOUDINARY_API_KEY"),
        api_secret=_env_str("CLOUDINARY_API_SECRET"),
        folder=_env_str("CLOUDINARY_FOLDER", "portfolio"),
        api_base_url=_env_str("CLOUDINARY_API_BASE_URL", "https://api.cloudinary.com/v1_1"),
        timeout_s=_env_float("CLOUDINARY_TIMEOUT_S", 60.0),
    )
    admin = AdminConfig(
        username=_env_str("ADMIN_USERNAME", "admin"),
        password=_env_str("ADMIN_PASSWORD", "admin123"),
        password_hash=_env_str("ADMIN_PASSWORD_HASH"),
        # Local default keeps development simple.
        # In production, set JWT_SECRET in environment.
        jwt_secret=_env_str("JWT_SECRET", "dev-change-this-secret"),
        jwt_algorithm=_env_str("JWT_ALG", "HS256"),
        token_expire_hours=_env_int("ADMIN_TOKEN_EXPIRE_HOURS", 24),
    )

    max_upload_bytes = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    if max_upload_bytes <= 0:
        max_upload_bytes = DEFAULT_MAX_UPLOAD_BYTES

    return Settings(
        media=media,
        admin=admin,
        max_upload_bytes=max_upload_bytes,
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
