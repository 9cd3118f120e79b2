"""Turn user-selected files into image drafts for the collection."""

from __future__ import annotations

import inspect
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

from models.image_record import ImageRecord, SourceKind
from utils.media_validation import encode_payload, is_image_mime

LOGGER = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """A file on disk exposed with the same surface as an uploaded file."""

    path: Path
    filename: str = ""
    content_type: Optional[str] = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.filename = self.filename or self.path.name
        if self.content_type is None:
            self.content_type, _ = mimetypes.guess_type(self.path.name)

    def read(self) -> bytes:
        return self.path.read_bytes()


@dataclass
class UploadReport:
    """Outcome of one upload batch."""

    processed: int = 0
    drafts: List[ImageRecord] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return len(self.drafts)

    @property
    def processing_message(self) -> str:
        return f"Processing {self.processed} image(s)..."

    @property
    def result_message(self) -> str:
        return f"{self.accepted} image(s) added successfully."


async def _read_bytes(upload: Any) -> bytes:
    data = upload.read()
    if inspect.isawaitable(data):
        data = await data
    return data


async def read_uploads(files: Iterable[Any]) -> UploadReport:
    """Read image files and return one draft record per accepted file.

    Args:
        files: File-like objects exposing `filename`, `content_type` and a sync
            or async `read()` (FastAPI `UploadFile` and `LocalFile` both work).

    Returns:
        An `UploadReport`. Non-image files and files that cannot be read are
        logged and left out; they never raise.
    """
    report = UploadReport()
    for upload in files or []:
        report.processed += 1
        name = getattr(upload, "filename", None) or "unnamed"
        mime_type = getattr(upload, "content_type", None)
        if not is_image_mime(mime_type):
            LOGGER.warning("Skipping non-image file: %s", name)
            continue
        try:
            raw = await _read_bytes(upload)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Failed to read file: %s (%s)", name, exc)
            continue
        if not raw:
            LOGGER.warning("Skipping empty file: %s", name)
            continue
        report.drafts.append(
            ImageRecord(id=None, source_kind=SourceKind.UPLOADED, payload=encode_payload(raw), mime_type=mime_type)
        )
    return report
