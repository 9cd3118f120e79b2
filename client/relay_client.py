"""HTTP client for the relay backend.

Every call is a single request with no retry. Failures become `RelayError`
carrying the backend's `error` message when one was sent; responses flagged
`empty_result` are returned as None instead of raising.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Sequence

import httpx

from models.image_record import ImageRecord
from services.relay_errors import UNKNOWN_ERROR_MESSAGE, EmptyResultError, ProviderError, RelayError

LOGGER = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:3001"
DEFAULT_TIMEOUT_SECONDS = 120.0


class RelayClient:
    """Call the `/mix`, `/optimize` and `/generate` routes."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            base_url: Backend root URL; defaults to IMAGE_MIXER_BACKEND_URL.
            timeout: Seconds to wait for one call; defaults to IMAGE_MIXER_TIMEOUT.
            transport: Optional httpx transport, used to stub the backend.
        """
        self.base_url = (base_url or os.getenv("IMAGE_MIXER_BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.getenv("IMAGE_MIXER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))
        self._transport = transport

    async def mix(self, images: Sequence[ImageRecord], prompt: str) -> Optional[str]:
        """Return the base64 payload of the generated image, or None if the model returned none."""
        body = {
            "images": [{"dataUrl": image.data_url, "mimeType": image.mime_type} for image in images],
            "prompt": prompt,
        }
        data = await self._post("/mix", body)
        return data.get("image") if data else None

    async def optimize(self, prompt: str) -> Optional[str]:
        """Return a rewritten prompt, or None if the model returned no text."""
        data = await self._post("/optimize", {"prompt": prompt})
        return data.get("prompt") if data else None

    async def generate_variations(self, prompt: str) -> Optional[str]:
        """Return the numbered list of alternative prompts, or None."""
        data = await self._post("/generate", {"prompt": prompt})
        return data.get("prompts") if data else None

    async def _post(self, path: str, body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=body)
        except httpx.RequestError as exc:
            LOGGER.error("Relay request to %s failed: %s", path, exc)
            raise ProviderError(UNKNOWN_ERROR_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_success and isinstance(data, dict):
            return data

        error = _error_from(data)
        if isinstance(error, EmptyResultError):
            LOGGER.info("Relay %s returned no result: %s", path, error.message)
            return None
        LOGGER.error("Relay %s failed with status %s: %s", path, response.status_code, error.message)
        raise error


def _error_from(data: Any) -> RelayError:
    """Rebuild the relay error described by a failure body."""
    if not isinstance(data, dict):
        return ProviderError(UNKNOWN_ERROR_MESSAGE)
    message = data.get("error") if isinstance(data.get("error"), str) else None
    message = message or UNKNOWN_ERROR_MESSAGE
    if data.get("code") == EmptyResultError.code:
        return EmptyResultError(message)
    return ProviderError(message)
