"""Prompt rewriting helpers built on text-only Responses API calls."""

import logging
import os
from typing import Optional

from openai import AsyncOpenAI

from services.openai.image_prompts import build_optimize_prompt, build_variations_prompt
from services.openai.media_inputs import build_text_inputs
from services.openai.response_parser import extract_first_text

LOGGER = logging.getLogger(__name__)
DEFAULT_TEXT_MODEL = "gpt-4.1-mini"


class PromptAssistant:
    """Rewrite a user's prompt or suggest alternatives for it."""

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model or os.getenv("OPENAI_TEXT_MODEL") or DEFAULT_TEXT_MODEL

    async def optimize(self, prompt: str) -> Optional[str]:
        """Return one more descriptive rewrite of `prompt`, or None."""
        return await self._complete(build_optimize_prompt(prompt))

    async def generate_variations(self, prompt: str) -> Optional[str]:
        """Return three alternatives to `prompt` as a numbered list, or None."""
        return await self._complete(build_variations_prompt(prompt))

    async def _complete(self, text: str) -> Optional[str]:
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=build_text_inputs(text),
            )
        except Exception as exc:
            LOGGER.error("OpenAI text request failed: %s", exc)
            raise
        result = extract_first_text(response)
        if result is None:
            LOGGER.warning("Text request returned no output_text part.")
        return result
