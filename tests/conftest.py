import base64
from types import SimpleNamespace

import pytest

from dal.local_storage_dal import LocalStorageDAL
from models.image_record import ImageRecord, SourceKind
from utils.database_init import AsyncDatabaseInitializer

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PNG_B64 = base64.b64encode(PNG_BYTES).decode("utf-8")


class FakeResponses:
    """Stand-in for `AsyncOpenAI().responses` that records every call."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


class FakeOpenAI:
    def __init__(self, result=None, error=None):
        self.responses = FakeResponses(result=result, error=error)


def text_message(*texts):
    return SimpleNamespace(
        type="message",
        content=[SimpleNamespace(type="output_text", text=text) for text in texts],
    )


def image_call(data):
    return SimpleNamespace(type="image_generation_call", result=data)


def provider_response(*items):
    return SimpleNamespace(output=list(items), usage=SimpleNamespace(input_tokens=10, output_tokens=20))


@pytest.fixture
def png_b64():
    return PNG_B64


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def make_draft():
    def _make(kind=SourceKind.UPLOADED, payload=PNG_B64, mime_type="image/png"):
        return ImageRecord(id=None, source_kind=kind, payload=payload, mime_type=mime_type)

    return _make


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def responses():
    """Builders for provider response objects."""
    return SimpleNamespace(text=text_message, image=image_call, build=provider_response)


@pytest.fixture
def storage(tmp_path):
    return LocalStorageDAL(AsyncDatabaseInitializer(tmp_path / "device"))
