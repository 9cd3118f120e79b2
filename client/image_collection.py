"""Ordered collection of source images, optionally mirrored to device storage."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional
from uuid import uuid4

from dal.local_storage_dal import IMAGES_KEY, LocalStorageDAL
from models.image_record import ImageRecord, SourceKind
from utils.media_validation import parse_data_url

LOGGER = logging.getLogger(__name__)


class ImageCollection:
    """Manage the images that will be sent to the mixer.

    Records keep append order and are never deduplicated. When a storage
    backend is attached, every mutation writes the full collection before
    returning.
    """

    def __init__(self, storage: Optional[LocalStorageDAL] = None, storage_key: str = IMAGES_KEY) -> None:
        self._records: List[ImageRecord] = []
        self._storage = storage
        self._storage_key = storage_key

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ImageRecord]:
        return iter(list(self._records))

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)

    @property
    def records(self) -> List[ImageRecord]:
        """Return a copy of the records in append order."""
        return list(self._records)

    def get(self, record_id: str) -> Optional[ImageRecord]:
        """Return the record with `record_id`, or None."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def add(self, draft: ImageRecord) -> ImageRecord:
        """Assign a fresh id to `draft`, append it and return the stored record."""
        record = draft.with_id(self._new_id())
        self._records.append(record)
        await self._persist()
        return record

    async def remove(self, record_id: str) -> bool:
        """Remove the record with `record_id`. Unknown ids are ignored.

        Returns:
            True if a record was removed.
        """
        remaining = [record for record in self._records if record.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        await self._persist()
        return True

    async def clear(self) -> None:
        """Drop every record."""
        self._records = []
        await self._persist()

    async def load(self) -> int:
        """Rebuild the collection from storage and return the number of records.

        Missing or malformed data leaves the collection empty; entries that
        are not base64 data URLs are skipped. Nothing here raises.
        """
        self._records = []
        if self._storage is None:
            return 0
        try:
            stored = await self._storage.load_list(self._storage_key)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Failed to load images from storage: %s", exc)
            return 0
        for data_url in stored:
            try:
                mime_type, payload = parse_data_url(data_url)
            except ValueError as exc:
                LOGGER.warning("Skipping stored image: %s", exc)
                continue
            self._records.append(
                ImageRecord(id=self._new_id(), source_kind=SourceKind.UPLOADED, payload=payload, mime_type=mime_type)
            )
        return len(self._records)

    async def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            await self._storage.save_list(self._storage_key, [record.data_url for record in self._records])
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Failed to save images to storage: %s", exc)

    def _new_id(self) -> str:
        record_id = uuid4().hex
        while record_id in self:
            record_id = uuid4().hex
        return record_id
