"""
Freehand drawing canvas.

Pointer events trace strokes onto a transparent raster. The canvas can be
committed to the collection as a PNG, saved for later, or reloaded from a
previously saved drawing.
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from dal.local_storage_dal import DRAWINGS_KEY, LocalStorageDAL
from models.image_record import ImageRecord, SourceKind
from utils.media_validation import encode_payload, parse_data_url, to_data_url

LOGGER = logging.getLogger(__name__)

CANVAS_WIDTH = 350
CANVAS_HEIGHT = 250
STROKE_COLOR = (255, 255, 255, 255)  # opaque white, RGBA
STROKE_WIDTH = 5


@dataclass
class Stroke:
    """Points visited between one pointer-down and the matching pointer-up."""

    points: List[Tuple[int, int]] = field(default_factory=list)

    def add_point(self, point: Tuple[int, int]):
        self.points.append(point)


class SavedDrawings:
    """Drawings kept for later, newest first, mirrored to device storage."""

    def __init__(self, storage: Optional[LocalStorageDAL] = None, storage_key: str = DRAWINGS_KEY):
        self._storage = storage
        self._storage_key = storage_key
        self.items: List[str] = []

    def __len__(self) -> int:
        return len(self.items)

    async def load(self) -> int:
        """Read the saved drawings from storage; failures leave the set empty."""
        self.items = []
        if self._storage is None:
            return 0
        try:
            self.items = await self._storage.load_list(self._storage_key)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Failed to load drawings from storage: %s", exc)
        return len(self.items)

    async def add(self, data_url: str):
        self.items.insert(0, data_url)
        await self._persist()

    async def delete(self, index: int) -> bool:
        """Remove the drawing at `index`. Out-of-range positions are ignored."""
        if not 0 <= index < len(self.items):
            return False
        del self.items[index]
        await self._persist()
        return True

    async def _persist(self):
        if self._storage is None:
            return
        try:
            await self._storage.save_list(self._storage_key, self.items)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Failed to save drawings to storage: %s", exc)


class DrawingCanvas:
    """
    Transparent RGBA raster that records pointer strokes.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        saved: Drawings saved for later editing.
    """

    def __init__(
        self,
        width: int = CANVAS_WIDTH,
        height: int = CANVAS_HEIGHT,
        saved: Optional[SavedDrawings] = None,
    ):
        self.width = width
        self.height = height
        self.saved = saved or SavedDrawings()

        self._canvas = self._blank()
        self._strokes: List[Stroke] = []
        self._current_stroke: Optional[Stroke] = None
        self.has_drawing = False

    @property
    def is_drawing(self) -> bool:
        return self._current_stroke is not None

    @property
    def strokes(self) -> List[Stroke]:
        return list(self._strokes)

    def image(self) -> Image.Image:
        """Return a copy of the current raster."""
        return self._canvas.copy()

    def pointer_down(self, x: int, y: int):
        """Begin a stroke at `(x, y)` without drawing anything yet."""
        self._current_stroke = Stroke(points=[self._clamp(x, y)])

    def pointer_move(self, x: int, y: int):
        """Extend the current stroke to `(x, y)`. Ignored when no stroke is active."""
        if self._current_stroke is None:
            return
        point = self._clamp(x, y)
        last = self._current_stroke.points[-1]
        self._draw_segment(last, point)
        self._current_stroke.add_point(point)
        self.has_drawing = True

    def pointer_up(self):
        """Finish the current stroke."""
        if self._current_stroke is not None and len(self._current_stroke.points) > 1:
            self._strokes.append(self._current_stroke)
        self._current_stroke = None

    pointer_leave = pointer_up

    def clear(self):
        self._canvas = self._blank()
        self._strokes = []
        self._current_stroke = None
        self.has_drawing = False

    def to_png(self) -> bytes:
        """Rasterize the canvas as PNG bytes."""
        out_io = io.BytesIO()
        self._canvas.save(out_io, format="PNG")
        return out_io.getvalue()

    def commit(self) -> Optional[ImageRecord]:
        """
        Return the drawing as a draft for the collection and clear the canvas.

        Returns:
            The draft record, or None if nothing has been drawn.
        """
        if not self.has_drawing:
            return None
        draft = ImageRecord(
            id=None,
            source_kind=SourceKind.DRAWN,
            payload=encode_payload(self.to_png()),
            mime_type="image/png",
        )
        self.clear()
        return draft

    async def save(self) -> Optional[str]:
        """
        Save the drawing for later without clearing the canvas.

        Returns:
            The saved data URL, or None if nothing has been drawn.
        """
        if not self.has_drawing:
            return None
        data_url = to_data_url(encode_payload(self.to_png()), "image/png")
        await self.saved.add(data_url)
        return data_url

    def load(self, index: int) -> bool:
        """
        Replace the canvas with the saved drawing at `index`, scaled to fit.

        Returns:
            True if the drawing was loaded.
        """
        if not 0 <= index < len(self.saved.items):
            return False
        try:
            _, payload = parse_data_url(self.saved.items[index])
            src = Image.open(io.BytesIO(base64.b64decode(payload)))
            src.load()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Saved drawing %d is not readable: %s", index, exc)
            return False

        self.clear()
        self._canvas = src.convert("RGBA").resize((self.width, self.height), Image.LANCZOS)
        self.has_drawing = True
        return True

    async def delete_saved(self, index: int) -> bool:
        return await self.saved.delete(index)

    def _blank(self) -> Image.Image:
        return Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))

    def _draw_segment(self, start: Tuple[int, int], end: Tuple[int, int]):
        draw = ImageDraw.Draw(self._canvas)
        draw.line([start, end], fill=STROKE_COLOR, width=STROKE_WIDTH)
        # Round caps at both ends
        radius = STROKE_WIDTH // 2
        for x, y in (start, end):
            draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=STROKE_COLOR)

    def _clamp(self, x: int, y: int) -> Tuple[int, int]:
        return (
            int(min(max(x, 0), self.width - 1)),
            int(min(max(y, 0), self.height - 1)),
        )
