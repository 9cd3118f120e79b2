"""State container for one mixing session.

`MixerWorkspace` owns the image collection, the prompt and the last result,
and is the only place user commands mutate them. Each provider-backed action
has its own busy flag: it is set before the request is sent and cleared on
every exit path, and a second call while it is set returns without sending.
Results that arrive late are applied as-is (last write wins).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from client.capture.camera import CameraCapture
from client.capture.drawing import DrawingCanvas
from client.capture.upload import UploadReport, read_uploads
from client.image_collection import ImageCollection
from client.prompt_builder import FigurePrompt
from client.prompt_state import PromptState
from client.relay_client import RelayClient
from models.image_record import ImageRecord, SourceKind
from services.relay_errors import RelayError
from utils.media_validation import GENERATED_IMAGE_MIME, generated_image_data_url

LOGGER = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please add at least one image and a prompt."
PROMPT_REQUIRED_MESSAGE = "Please enter a prompt first."
EMPTY_MIX_MESSAGE = "Failed to generate image. The model might not have returned an image."
EMPTY_OPTIMIZE_MESSAGE = "The model did not return an optimized prompt."
EMPTY_VARIATIONS_MESSAGE = "The model did not return any prompt variations."


@dataclass
class BusyFlags:
    mixing: bool = False
    optimizing: bool = False
    generating_variations: bool = False


class MixerWorkspace:
    """
    Attributes:
        collection: Images that will be sent to the mixer.
        prompt: Prompt text and pending suggestions.
        result: Base64 payload of the last generated image, or None.
        error: Message for the last failure, or None.
        feedback: Informational message (e.g. upload counts), or None.
        busy: Per-action in-flight flags.
    """

    def __init__(
        self,
        relay: RelayClient,
        collection: Optional[ImageCollection] = None,
        prompt: Optional[PromptState] = None,
    ) -> None:
        self.relay = relay
        self.collection = collection if collection is not None else ImageCollection()
        self.prompt = prompt if prompt is not None else PromptState()
        self.result: Optional[str] = None
        self.error: Optional[str] = None
        self.feedback: Optional[str] = None
        self.busy = BusyFlags()

    # -- gating -----------------------------------------------------------

    @property
    def can_mix(self) -> bool:
        return len(self.collection) > 0 and self.prompt.is_submittable and not self.busy.mixing

    @property
    def can_optimize(self) -> bool:
        return self.prompt.is_submittable and not self.busy.optimizing

    @property
    def can_generate_variations(self) -> bool:
        return self.prompt.is_submittable and not self.busy.generating_variations

    @property
    def result_data_url(self) -> Optional[str]:
        return generated_image_data_url(self.result) if self.result else None

    # -- images -----------------------------------------------------------

    async def add_image(self, draft: ImageRecord) -> ImageRecord:
        return await self.collection.add(draft)

    async def remove_image(self, record_id: str) -> bool:
        return await self.collection.remove(record_id)

    async def add_uploads(self, files: Iterable[Any]) -> UploadReport:
        """Add every image among `files`, reporting how many were accepted."""
        report = await read_uploads(files)
        for draft in report.drafts:
            await self.collection.add(draft)
        self.feedback = report.result_message
        LOGGER.info("Uploads processed=%d accepted=%d", report.processed, report.accepted)
        return report

    def start_camera(self, camera: CameraCapture) -> bool:
        started = camera.start()
        if not started:
            self.error = camera.error
        return started

    async def capture_photo(self, camera: CameraCapture) -> Optional[ImageRecord]:
        """Add the camera's current frame. Leaves the camera streaming for more captures."""
        draft = camera.capture()
        if draft is None:
            if camera.error:
                self.error = camera.error
            return None
        return await self.collection.add(draft)

    async def add_drawing(self, canvas: DrawingCanvas) -> Optional[ImageRecord]:
        """Add the canvas contents and clear it. Nothing happens on a blank canvas."""
        draft = canvas.commit()
        if draft is None:
            return None
        return await self.collection.add(draft)

    async def add_result_to_collection(self) -> Optional[ImageRecord]:
        """Feed the last generated image back in as a source image."""
        if not self.result:
            return None
        return await self.collection.add(
            ImageRecord(id=None, source_kind=SourceKind.GENERATED, payload=self.result, mime_type=GENERATED_IMAGE_MIME)
        )

    # -- prompt -----------------------------------------------------------

    def set_prompt(self, text: Optional[str]):
        self.prompt.set_text(text)

    def use_built_prompt(self, figure: FigurePrompt) -> str:
        self.prompt.set_text(figure.build())
        return self.prompt.text

    def accept_optimization(self) -> bool:
        return self.prompt.accept_optimization()

    def dismiss_optimization(self):
        self.prompt.dismiss_optimization()

    def adopt_variation(self, index: int) -> bool:
        return self.prompt.adopt_variation(index)

    # -- provider actions -------------------------------------------------

    async def mix(self) -> Optional[str]:
        """
        Send the collection and prompt to the relay.

        Returns:
            The generated payload, or None on validation failure, empty
            result, relay failure or when a mix is already running.
        """
        if self.busy.mixing:
            return None
        if len(self.collection) == 0 or not self.prompt.is_submittable:
            self.error = VALIDATION_MESSAGE
            return None

        self.error = None
        self.result = None
        self.busy.mixing = True
        try:
            payload = await self.relay.mix(self.collection.records, self.prompt.text)
            if payload:
                self.result = payload
            else:
                self.error = EMPTY_MIX_MESSAGE
            return payload or None
        except RelayError as exc:
            self.error = exc.message
            return None
        finally:
            self.busy.mixing = False

    async def optimize_prompt(self) -> Optional[str]:
        """Ask for a rewrite of the prompt and hold it for review; never applies it."""
        if self.busy.optimizing:
            return None
        if not self.prompt.is_submittable:
            self.error = PROMPT_REQUIRED_MESSAGE
            return None

        self.error = None
        self.busy.optimizing = True
        try:
            suggestion = await self.relay.optimize(self.prompt.text)
            if not suggestion:
                self.error = EMPTY_OPTIMIZE_MESSAGE
                return None
            suggestion = suggestion.strip()
            self.prompt.offer_optimization(suggestion)
            return suggestion
        except RelayError as exc:
            self.error = exc.message
            return None
        finally:
            self.busy.optimizing = False

    async def generate_variations(self) -> List[str]:
        """Ask for three alternative prompts and offer them for adoption."""
        if self.busy.generating_variations:
            return []
        if not self.prompt.is_submittable:
            self.error = PROMPT_REQUIRED_MESSAGE
            return []

        self.error = None
        self.busy.generating_variations = True
        try:
            numbered_list = await self.relay.generate_variations(self.prompt.text)
            candidates = self.prompt.offer_variations(numbered_list or "")
            if not candidates:
                self.error = EMPTY_VARIATIONS_MESSAGE
            return candidates
        except RelayError as exc:
            self.error = exc.message
            return []
        finally:
            self.busy.generating_variations = False
