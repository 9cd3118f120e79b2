"""
Camera capture adapter.

Holds at most one open video device at a time and turns the current frame
into a PNG image draft on request. Device access failures are reported
through `error` rather than raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import cv2

from models.image_record import ImageRecord, SourceKind
from utils.media_validation import encode_payload

LOGGER = logging.getLogger(__name__)

CAMERA_ERROR_MESSAGE = "Could not access the camera. Please check permissions."
CAPTURE_ERROR_MESSAGE = "Could not capture a photo."


class FacingMode(str, Enum):
    """Which way the requested camera faces."""

    ENVIRONMENT = "environment"
    USER = "user"

    @property
    def opposite(self) -> "FacingMode":
        return FacingMode.USER if self is FacingMode.ENVIRONMENT else FacingMode.ENVIRONMENT


DEFAULT_DEVICE_INDICES: Dict[FacingMode, int] = {
    FacingMode.ENVIRONMENT: 0,
    FacingMode.USER: 1,
}


class CameraCapture:
    """
    Exclusive handle on one video input device.

    Attributes:
        facing_mode: Preferred camera orientation.
        device_indices: Mapping from facing mode to OpenCV device index.
        error: User-facing message from the last failed start, or None.
    """

    def __init__(
        self,
        facing_mode: FacingMode = FacingMode.ENVIRONMENT,
        device_indices: Optional[Dict[FacingMode, int]] = None,
        opener: Optional[Callable[[int], Any]] = None,
        width: int = 1280,
        height: int = 720,
    ):
        self.facing_mode = FacingMode(facing_mode)
        self.device_indices = dict(device_indices or DEFAULT_DEVICE_INDICES)
        self.width = width
        self.height = height
        self.error: Optional[str] = None

        self._opener = opener or cv2.VideoCapture
        self.cap: Optional[Any] = None

    @property
    def is_streaming(self) -> bool:
        return self.cap is not None

    def start(self) -> bool:
        """
        Open the device for the current facing mode.

        Any stream that is already open is released first, so the device is
        never held twice.

        Returns:
            True if the camera started, False otherwise (see `error`).
        """
        self.error = None
        self.stop()

        device_index = self.device_indices.get(self.facing_mode, 0)
        try:
            cap = self._opener(device_index)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Camera access error on device %s: %s", device_index, exc)
            cap = None

        if cap is None or not cap.isOpened():
            if cap is not None:
                cap.release()
            LOGGER.error("Failed to open camera %s (%s)", device_index, self.facing_mode.value)
            self.error = CAMERA_ERROR_MESSAGE
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        # Keep only the latest frame buffered
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self.cap = cap
        LOGGER.info("Camera started on device %s (%s)", device_index, self.facing_mode.value)
        return True

    def capture(self) -> Optional[ImageRecord]:
        """
        Sample the current frame as a PNG draft.

        Returns:
            The draft record, or None if no stream is open or no frame could
            be read. Failures set `error`.
        """
        if self.cap is None:
            self.error = CAPTURE_ERROR_MESSAGE
            return None

        ok, frame = self.cap.read()
        if not ok or frame is None:
            LOGGER.warning("Camera returned no frame")
            self.error = CAPTURE_ERROR_MESSAGE
            return None

        encoded, buffer = cv2.imencode(".png", frame)
        if not encoded:
            LOGGER.warning("Failed to encode camera frame")
            self.error = CAPTURE_ERROR_MESSAGE
            return None

        self.error = None

        return ImageRecord(
            id=None,
            source_kind=SourceKind.CAPTURED,
            payload=encode_payload(buffer.tobytes()),
            mime_type="image/png",
        )

    def switch_facing(self) -> bool:
        """
        Toggle the facing mode, restarting the stream if one is open.

        Returns:
            Whether a stream is open afterwards.
        """
        self.facing_mode = self.facing_mode.opposite
        if self.is_streaming:
            return self.start()
        return False

    def stop(self):
        """Release the device if one is held."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            LOGGER.info("Camera stopped")

    close = stop

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
