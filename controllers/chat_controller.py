from typing import Any, Dict

from fastapi import HTTPException, Request

from models.session_models import ASSISTANT
from services.chat_orchestrator import ChatOrchestrator
from services.session_store import SessionBusyError, SessionStore


async def send_message(request: Request, session_id: str, text: str) -> Dict[str, Any]:
    """Append the user's message, produce the assistant reply, and append it too."""
    cleaned = text.strip() if text else ""
    if not cleaned:
        raise HTTPException(status_code=400, detail="Message text must not be empty.")

    store: SessionStore = request.app.state.session_store
    orchestrator: ChatOrchestrator = request.app.state.chat_orchestrator

    try:
        with store.chat_turn(session_id, cleaned) as user_message:
            reply_text = await orchestrator.reply(cleaned)
            reply = store.add_message(session_id, ASSISTANT, reply_text)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SessionBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return {
        "session_id": session_id,
        "message": user_message.to_dict(),
        "reply": reply.to_dict(),
    }
