"""Session lifecycle helpers."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request

from services.session_store import SessionStore


def _store(request: Request) -> SessionStore:
	return request.app.state.session_store


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new session and return its initial snapshot."""
	state = _store(request).create()
	return state.to_dict()


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the current snapshot of a session."""
	try:
		state = _store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return state.to_dict()


async def reset_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Clear the uploaded image and identification state, keeping the chat."""
	try:
		state = _store(request).reset(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return state.to_dict()
