"""
Cloudinary media-store client.

Used endpoints (relative to https://api.cloudinary.com/v1_1/<cloud_name>):
- POST /image/upload   -> {"secure_url", "public_id", "width", "height", "format", "bytes", ...}
- POST /image/destroy  -> {"result": "ok" | "not found"}

Both are signed requests: sha1 over the sorted request params plus the API
secret.
"""

from __future__ import annotations

import hashlib
import time
from typing import Any

import httpx

from .settings import MediaStoreConfig, get_settings

# Incoming transformation applied on upload: scale down large images and let
# Cloudinary pick the quality.
UPLOAD_TRANSFORMATION = "c_scale,q_auto,w_1200"

# Params that Cloudinary excludes from the signature.
_UNSIGNED_PARAMS = {"file", "api_key", "cloud_name", "resource_type"}


# Media-store failures are explicit and separable from other runtime errors.
class MediaStoreError(RuntimeError):
    pass


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """
    Compute the Cloudinary request signature for `params`.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class MediaStore:
    def __init__(
        self,
        config: MediaStoreConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def _check_configured(self) -> None:
        missing = [
            name
            for name, value in (
                ("CLOUDINARY_CLOUD_NAME", self.config.cloud_name),
                ("CLOUDINARY_API_KEY", self.config.api_key),
                ("CLOUDINARY_API_SECRET", self.config.api_secret),
            )
            if not value
        ]
        if missing:
            raise MediaStoreError(f"Media store is not configured: {', '.join(missing)} missing.")

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self.config.api_secret)
        params["api_key"] = self.config.api_key
        return params

    def _client(self) -> httpx.AsyncClient:
        base_url = f"{self.config.api_base_url.rstrip('/')}/{self.config.cloud_name}"
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=self.config.timeout_s,
            transport=self._transport,
        )

    async def _post(self, path: str, *, data: dict[str, Any], files: dict | None = None) -> dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.post(path, data=data, files=files)
        except httpx.HTTPError as exc:
            raise MediaStoreError(f"Media store request to {path} failed: {exc}") from exc

        if resp.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:500]
            raise MediaStoreError(f"Media store request to {path} failed: {resp.status_code} {body}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise MediaStoreError(f"Media store returned a non-JSON response for {path}.") from exc
        if not isinstance(payload, dict):
            raise MediaStoreError(f"Media store returned an unexpected payload for {path}.")
        return payload

    async def upload(
        self,
        data: bytes,
        *,
        filename: str,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload one image and return Cloudinary's raw upload payload.
        """
        self._check_configured()
        if not data:
            raise MediaStoreError("Refusing to upload an empty file.")

        params: dict[str, Any] = {"transformation": UPLOAD_TRANSFORMATION}
        if self.config.folder:
            params["folder"] = self.config.folder

        payload = await self._post(
            "/image/upload",
            data=self._signed(params),
            files={"file": (filename, data, content_type or "application/octet-stream")},
        )
        if not payload.get("public_id") or not (payload.get("secure_url") or payload.get("url")):
            raise MediaStoreError("Media store upload returned no public_id/url.")
        return payload

    async def delete(self, public_id: str) -> bool:
        """
        Delete one image by public id.

        Returns False when the store reports the asset as not found.
        """
        public_id = (public_id or "").strip()
        if not public_id:
            raise MediaStoreError("public_id is empty.")
        self._check_configured()

        payload = await self._post(
            "/image/destroy",
            data=self._signed({"public_id": public_id, "invalidate": "true"}),
        )
        result = str(payload.get("result") or "")
        if result == "ok":
            return True
        if result == "not found":
            return False
        raise MediaStoreError(f"Media store could not delete {public_id}: {result or 'no result'}")


def get_media_store() -> MediaStore:
    """
    FastAPI dependency; tests override it with a fake store.
    """
    return MediaStore(get_settings().media)
