"""Validation helpers for image payloads and data URLs."""

import base64
from typing import Optional, Tuple

GENERATED_IMAGE_MIME = "image/png"


def is_image_mime(mime_type: Optional[str]) -> bool:
    """Return True when the MIME type declares an image (`image/*`)."""
    if not mime_type:
        return False
    return mime_type.lower().split(";", 1)[0].strip().startswith("image/")


def encode_payload(image_bytes: bytes) -> str:
    """Encode raw image bytes as a base64 text payload."""
    return base64.b64encode(image_bytes).decode("utf-8")


def to_data_url(payload: str, mime_type: str) -> str:
    """Build a `data:<mime>;base64,<payload>` string."""
    return f"data:{mime_type};base64,{payload}"


def strip_data_url(data_url: str) -> str:
    """Return the payload of a data URL (everything after the first comma).

    Strings without a comma are treated as bare payloads and returned as-is.

    Raises:
        ValueError: If the payload is empty.
    """
    payload = data_url.split(",", 1)[1] if "," in data_url else data_url
    payload = payload.strip()
    if not payload:
        raise ValueError("Image data URL has no payload.")
    return payload


def parse_data_url(data_url: str) -> Tuple[str, str]:
    """Split a base64 data URL into `(mime_type, payload)`.

    Raises:
        ValueError: If the string is not a base64 data URL.
    """
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("Not a data URL.")
    header, payload = data_url[len("data:"):].split(",", 1)
    parts = header.split(";")
    if "base64" not in parts[1:]:
        raise ValueError("Only base64 data URLs are supported.")
    mime_type = parts[0] or "application/octet-stream"
    if not payload:
        raise ValueError("Image data URL has no payload.")
    return mime_type, payload


def generated_image_data_url(payload: str) -> str:
    """Present a provider-returned payload the way the view displays it."""
    return to_data_url(payload, GENERATED_IMAGE_MIME)
