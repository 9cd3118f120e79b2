"""Request and response bodies for the relay HTTP surface."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MixImage(BaseModel):
    """One image as sent by the client, in data URL form."""

    model_config = ConfigDict(populate_by_name=True)

    data_url: str = Field(alias="dataUrl")
    mime_type: str = Field(alias="mimeType")


class MixRequest(BaseModel):
    images: List[MixImage] = []
    prompt: str = ""


class MixResponse(BaseModel):
    image: str


class PromptRequest(BaseModel):
    prompt: str = ""


class OptimizeResponse(BaseModel):
    prompt: str


class VariationsResponse(BaseModel):
    prompts: str


class ErrorResponse(BaseModel):
    """Failure body returned with status 500.

    `code` is `empty_result` when the provider answered without usable
    output and `provider_error` for transport or provider failures.
    """

    error: str
    code: Optional[str] = None
