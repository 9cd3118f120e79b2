"""Helpers to pull image and text parts out of Responses API outputs."""

from typing import Any, Dict, Iterator, Optional


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from an SDK object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def iter_output_parts(response: Any) -> Iterator[Any]:
    """Yield output parts in order, flattening message content lists.

    Image generation calls are yielded as-is; message items are expanded into
    their content entries so callers see one flat, ordered sequence.
    """
    for item in _field(response, "output", None) or []:
        if _field(item, "type") == "message":
            for content in _field(item, "content", None) or []:
                yield content
        else:
            yield item


def inline_image_data(part: Any) -> Optional[str]:
    """Return base64 image data carried by a part, if any."""
    part_type = _field(part, "type")
    if part_type == "image_generation_call":
        return _field(part, "result") or None
    if part_type == "output_image":
        return _field(part, "image_base64") or _field(part, "data") or None
    return None


def extract_first_image(response: Any) -> Optional[str]:
    """Return the payload of the first part carrying inline image data."""
    for part in iter_output_parts(response):
        data = inline_image_data(part)
        if data:
            return data
    return None


def extract_first_text(response: Any) -> Optional[str]:
    """Return the first non-empty `output_text` part of the response."""
    for part in iter_output_parts(response):
        if _field(part, "type") == "output_text":
            text = _field(part, "text")
            if text:
                return text
    return None


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = _field(response, "usage", None)
    return {
        "input_tokens": _field(usage, "input_tokens", None) if usage else None,
        "output_tokens": _field(usage, "output_tokens", None) if usage else None,
    }
