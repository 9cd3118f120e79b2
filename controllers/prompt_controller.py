"""Controllers for the prompt optimization and variation helpers."""

from typing import Awaitable, Callable, Dict, Optional

from fastapi import Request

from services.openai.prompt_assistant import PromptAssistant
from services.relay_errors import (
    EmptyResultError,
    InvalidRequestError,
    ProviderError,
    describe_provider_error,
)

OPTIMIZE_EMPTY_MESSAGE = "Failed to generate prompt."
VARIATIONS_EMPTY_MESSAGE = "Failed to generate prompts."


async def _run(call: Callable[[str], Awaitable[Optional[str]]], prompt: str, empty_message: str) -> str:
    if not prompt.strip():
        raise InvalidRequestError("Please enter a prompt first.")
    try:
        result = await call(prompt)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ProviderError(describe_provider_error(exc)) from exc
    if not result:
        raise EmptyResultError(empty_message)
    return result


async def optimize_prompt(request: Request, prompt: str) -> Dict[str, str]:
    """Return a rewritten, more descriptive version of `prompt` under `prompt`."""
    assistant = PromptAssistant(request.app.state.openai_client)
    return {"prompt": await _run(assistant.optimize, prompt, OPTIMIZE_EMPTY_MESSAGE)}


async def generate_prompts(request: Request, prompt: str) -> Dict[str, str]:
    """Return three alternatives to `prompt` as one numbered-list string under `prompts`."""
    assistant = PromptAssistant(request.app.state.openai_client)
    return {"prompts": await _run(assistant.generate_variations, prompt, VARIATIONS_EMPTY_MESSAGE)}
