"""Session domain models for a single user's plant-care session."""

from __future__ import annotations

import base64
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.plant_models import ErrorDescriptor, IdentificationResult

USER = "user"
ASSISTANT = "assistant"


@dataclass
class ChatMessage:
	"""One entry of the append-only chat transcript."""

	id: int
	sender: str
	text: str
	created_at: float = field(default_factory=lambda: time.time())

	def to_dict(self) -> Dict[str, Any]:
		return {"id": self.id, "sender": self.sender, "text": self.text, "created_at": self.created_at}


@dataclass
class UploadedImage:
	"""Image currently uploaded for identification."""

	filename: str
	content_type: str
	data: bytes

	def data_url(self) -> str:
		encoded = base64.b64encode(self.data).decode("ascii")
		return f"data:{self.content_type};base64,{encoded}"


@dataclass
class SessionState:
	"""In-memory session tracking for identification and chat."""

	session_id: str
	messages: List[ChatMessage] = field(default_factory=list)
	image: Optional[UploadedImage] = None
	result: Optional[IdentificationResult] = None
	error: Optional[ErrorDescriptor] = None
	analyzing: bool = False
	# Bumped on reset; outcomes from analyses started earlier are discarded.
	generation: int = 0
	chat_pending: bool = False
	offline_mode: bool = False

	def next_message_id(self) -> int:
		return self.messages[-1].id + 1 if self.messages else 1

	def to_dict(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"image": self.image.data_url() if self.image else None,
			"result": self.result.to_dict() if self.result else None,
			"error": self.error.to_dict() if self.error else None,
			"analyzing": self.analyzing,
			"offline_mode": self.offline_mode,
			"messages": [message.to_dict() for message in self.messages],
		}
