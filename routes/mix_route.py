import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from controllers.mix_controller import mix_images
from models.relay_models import ErrorResponse, MixRequest, MixResponse
from services.relay_errors import UNKNOWN_ERROR_MESSAGE, RelayError

router = APIRouter(tags=["mix"])


@router.post("/mix", response_model=MixResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def post_mix(request: Request, payload: MixRequest):
    """Combine the posted images according to the prompt and return one generated image."""
    try:
        return await mix_images(request, payload.images, payload.prompt)
    except RelayError as exc:
        logging.error("Mix request failed: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    except Exception:  # pylint: disable=broad-exception-caught
        logging.exception("Unexpected error while mixing images")
        return JSONResponse(status_code=500, content={"error": UNKNOWN_ERROR_MESSAGE})
