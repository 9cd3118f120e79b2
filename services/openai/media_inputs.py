"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, List, Sequence, Tuple

from utils.media_validation import to_data_url


def build_image_content(payload: str, mime_type: str) -> Dict[str, Any]:
    """Return one `input_image` entry for a base64 payload and its MIME type."""
    return {"type": "input_image", "image_url": to_data_url(payload, mime_type)}


def build_mix_inputs(images: Sequence[Tuple[str, str]], prompt: str) -> List[Dict[str, Any]]:
    """Build a single user message: one part per image, then the prompt text.

    Args:
        images: `(payload, mime_type)` pairs, payloads without data URL prefix.
        prompt: The mixing instruction.
    """
    content: List[Dict[str, Any]] = [build_image_content(payload, mime) for payload, mime in images]
    content.append({"type": "input_text", "text": prompt})
    return [{"type": "message", "role": "user", "content": content}]


def build_text_inputs(text: str) -> List[Dict[str, Any]]:
    """Build a text-only user message."""
    return [{"type": "message", "role": "user", "content": [{"type": "input_text", "text": text}]}]
