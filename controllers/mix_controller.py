from typing import Dict, List, Tuple

from fastapi import Request

from models.relay_models import MixImage
from services.openai.image_mixer import ImageMixer
from services.relay_errors import (
    EmptyResultError,
    InvalidRequestError,
    ProviderError,
    RelayError,
    describe_provider_error,
)
from utils.media_validation import strip_data_url

MIX_EMPTY_MESSAGE = "Failed to generate image."


def _decode_images(images: List[MixImage]) -> List[Tuple[str, str]]:
    """Strip the data URL prefix from each image, keeping its declared MIME type."""
    decoded = []
    for index, image in enumerate(images, start=1):
        try:
            payload = strip_data_url(image.data_url)
        except ValueError as exc:
            raise InvalidRequestError(f"Image {index} has no data.") from exc
        decoded.append((payload, image.mime_type))
    return decoded


async def mix_images(request: Request, images: List[MixImage], prompt: str) -> Dict[str, str]:
    """Relay the images and prompt to the provider and return the generated image.

    Args:
        request: FastAPI Request (used to access the shared OpenAI client).
        images: Source images in data URL form.
        prompt: Mixing instruction.

    Returns:
        A dict with the base64 payload of the generated image under `image`.

    Raises:
        InvalidRequestError: If no images or no prompt were sent.
        EmptyResultError: If the provider returned no image part.
        ProviderError: If the provider call failed.
    """
    if not images or not prompt.strip():
        raise InvalidRequestError("Please add at least one image and a prompt.")
    decoded = _decode_images(images)

    mixer = ImageMixer(request.app.state.openai_client)
    try:
        payload = await mixer.mix(decoded, prompt)
    except RelayError:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ProviderError(describe_provider_error(exc)) from exc

    if not payload:
        raise EmptyResultError(MIX_EMPTY_MESSAGE)
    return {"image": payload}
