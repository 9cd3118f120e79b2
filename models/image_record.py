from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class SourceKind(str, Enum):
    """Where an image in the collection came from."""

    UPLOADED = "uploaded"
    CAPTURED = "captured"
    DRAWN = "drawn"
    GENERATED = "generated"


@dataclass(frozen=True)
class ImageRecord:
    """In-memory representation of one source image.

    Attributes:
        id: Collection-assigned identifier (None until the record is added).
        source_kind: Capture surface that produced the image.
        payload: Base64-encoded image bytes, without any data URL prefix.
        mime_type: Declared MIME type of the payload (e.g. image/png).
    """

    id: Optional[str]
    source_kind: SourceKind
    payload: str
    mime_type: str

    @property
    def data_url(self) -> str:
        """Return the record as a `data:<mime>;base64,<payload>` string."""
        return f"data:{self.mime_type};base64,{self.payload}"

    def with_id(self, record_id: str) -> "ImageRecord":
        """Return a copy of this record carrying `record_id`."""
        return replace(self, id=record_id)
