"""FastAPI routes for the prompt helpers."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from controllers.prompt_controller import generate_prompts, optimize_prompt
from models.relay_models import ErrorResponse, OptimizeResponse, PromptRequest, VariationsResponse
from services.relay_errors import UNKNOWN_ERROR_MESSAGE, RelayError

router = APIRouter(tags=["prompt"])
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _error_response(action: str, exc: Exception) -> JSONResponse:
	if isinstance(exc, RelayError):
		logging.error("%s request failed: %s", action, exc.message)
		return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
	logging.error("Unexpected error during %s request: %r", action, exc)
	return JSONResponse(status_code=500, content={"error": UNKNOWN_ERROR_MESSAGE})


@router.post("/optimize", response_model=OptimizeResponse, responses=ERROR_RESPONSES)
async def post_optimize(request: Request, payload: PromptRequest):
	"""Rewrite the prompt into one more descriptive paragraph."""
	try:
		return await optimize_prompt(request, payload.prompt)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return _error_response("Optimize", exc)


@router.post("/generate", response_model=VariationsResponse, responses=ERROR_RESPONSES)
async def post_generate(request: Request, payload: PromptRequest):
	"""Suggest three alternative prompts as a numbered list."""
	try:
		return await generate_prompts(request, payload.prompt)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		return _error_response("Generate", exc)
