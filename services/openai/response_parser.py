"""Helpers to parse chat-completion outputs."""

import json
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.plant_models import ErrorKind
from services.errors import RemoteServiceError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def extract_message_text(response: Any) -> str:
    """Return the text of the first choice, or raise if there is none."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Chat completion returned no choices.")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Chat completion returned empty content.")
    return content


def parse_json_reply(text: str, schema: Type[SchemaT]) -> SchemaT:
    """Parse a reply that must be a single JSON object matching `schema`."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, f"Reply is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Reply JSON is not an object.")
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise RemoteServiceError(
            ErrorKind.MALFORMED_RESPONSE,
            f"Reply does not match {schema.__name__}: {exc.error_count()} error(s)",
        ) from exc
