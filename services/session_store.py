"""Simple in-memory store for plant-care sessions.

All session mutations go through this store. Orchestrators return explicit
outcomes which `apply_identification` reduces into the session.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional
from uuid import uuid4

from models.plant_models import IdentificationOutcome
from models.session_models import ASSISTANT, USER, ChatMessage, SessionState, UploadedImage
from services.knowledge_base import GREETING


class SessionBusyError(RuntimeError):
	"""Raised when a request arrives while the same kind of request is pending."""


class SessionStore:
	"""Manage sessions, their identification state, and chat transcripts."""

	def __init__(self) -> None:
		self._sessions: Dict[str, SessionState] = {}

	def create(self) -> SessionState:
		"""Create a new session seeded with the assistant greeting."""
		session_id = uuid4().hex
		state = SessionState(session_id=session_id)
		state.messages.append(ChatMessage(id=1, sender=ASSISTANT, text=GREETING))
		self._sessions[session_id] = state
		return state

	def get(self, session_id: str) -> SessionState:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	@contextmanager
	def analysis(self, session_id: str, image: UploadedImage) -> Iterator[int]:
		"""Hold the analyzing flag for the duration of one identification.

		Yields the session generation the analysis belongs to. The flag is
		cleared on every exit path, including exceptions.
		"""
		state = self.get(session_id)
		if state.analyzing:
			raise SessionBusyError("An identification is already in progress for this session.")
		state.image = image
		state.error = None
		state.analyzing = True
		try:
			yield state.generation
		finally:
			state.analyzing = False

	def apply_identification(
		self,
		session_id: str,
		outcome: IdentificationOutcome,
		generation: Optional[int] = None,
	) -> SessionState:
		"""Apply an identification outcome; offline mode is sticky until reset.

		An outcome whose analysis started before the last reset is dropped.
		"""
		state = self.get(session_id)
		if generation is not None and generation != state.generation:
			logging.info("Discarding identification outcome for reset session %s", session_id)
			return state
		state.result = outcome.result
		state.error = outcome.error
		state.offline_mode = state.offline_mode or outcome.offline_mode
		return state

	@contextmanager
	def chat_turn(self, session_id: str, text: str) -> Iterator[ChatMessage]:
		"""Append the user's message and hold the chat-pending flag until the reply lands."""
		state = self.get(session_id)
		if state.chat_pending:
			raise SessionBusyError("A chat reply is already pending for this session.")
		message = self.add_message(session_id, USER, text)
		state.chat_pending = True
		try:
			yield message
		finally:
			state.chat_pending = False

	def add_message(self, session_id: str, sender: str, text: str) -> ChatMessage:
		"""Append a message to the session transcript."""
		state = self.get(session_id)
		message = ChatMessage(id=state.next_message_id(), sender=sender, text=text.strip())
		state.messages.append(message)
		return message

	def reset(self, session_id: str) -> SessionState:
		"""Clear identification state while keeping the chat transcript."""
		state = self.get(session_id)
		state.image = None
		state.result = None
		state.error = None
		state.offline_mode = False
		state.generation += 1
		return state

