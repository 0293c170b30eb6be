from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.chat_controller import send_message

router = APIRouter()


class MessagePayload(BaseModel):
    text: str


@router.post("/sessions/{session_id}/messages")
async def post_message(request: Request, session_id: str, payload: MessagePayload):
    """Send a plant-care question and receive the assistant's reply."""
    try:
        return await send_message(request, session_id, payload.text)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
