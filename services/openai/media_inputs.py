"""Utilities to build chat-completion message payloads."""

import base64
from typing import Any, Dict, List

from models.session_models import UploadedImage


def to_image_data_url(image: UploadedImage) -> str:
    """Convert raw image bytes into a data URL suitable for vision input."""
    encoded = base64.b64encode(image.data).decode("utf-8")
    return f"data:{image.content_type or 'image/jpeg'};base64,{encoded}"


def build_vision_messages(instruction: str, image: UploadedImage) -> List[Dict[str, Any]]:
    """Single user turn holding the instruction text and the inlined image."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": instruction},
                {"type": "image_url", "image_url": {"url": to_image_data_url(image)}},
            ],
        }
    ]


def build_text_messages(user_text: str, system_prompt: str = "") -> List[Dict[str, Any]]:
    """Optional system message followed by one user message."""
    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_text})
    return messages
