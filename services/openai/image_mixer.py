"""Composite image generation via the OpenAI Responses API."""

import logging
import os
import time
from typing import Any, Optional, Sequence, Tuple

from openai import AsyncOpenAI

from services.openai.media_inputs import build_mix_inputs
from services.openai.response_parser import extract_first_image, extract_usage

DEFAULT_IMAGE_MODEL = "gpt-4.1"
IMAGE_GENERATION_TOOL = {"type": "image_generation"}


class ImageMixer:
    """Send a set of source images plus an instruction and return one image."""

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model or os.getenv("OPENAI_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL

    async def mix(self, images: Sequence[Tuple[str, str]], prompt: str) -> Optional[str]:
        """Generate one image from the source images and the prompt.

        Args:
            images: `(payload, mime_type)` pairs with base64 payloads.
            prompt: Instruction describing how to combine the images.

        Returns:
            Base64 payload of the first image part in the response, or None
            when the model answered without an image.
        """
        start = time.time()
        response = await self._create_response(build_mix_inputs(images, prompt))
        payload = extract_first_image(response)
        usage = extract_usage(response)
        logging.info(
            "Mix request with %d image(s) finished in %.3fs (image=%s, input_tokens=%s, output_tokens=%s)",
            len(images),
            time.time() - start,
            payload is not None,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return payload

    async def _create_response(self, inputs) -> Any:
        """Send the multimodal request with image output enabled."""
        try:
            return await self.client.responses.create(
                model=self.model,
                input=inputs,
                tools=[IMAGE_GENERATION_TOOL],
            )
        except Exception as exc:
            logging.error("Error during OpenAI Responses API call: %s", exc)
            raise
