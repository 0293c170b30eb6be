from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile

from services.identification_orchestrator import IdentificationOrchestrator
from services.session_store import SessionBusyError, SessionStore
from utils.media_validation import read_image_upload


async def identify_plant(request: Request, session_id: str, file: UploadFile) -> Dict[str, Any]:
    """Handle a photo upload: validate, identify through the tiers, and record the outcome.

    Args:
        request: FastAPI Request object (used to access app.state for shared services).
        session_id: Session receiving the identification.
        file: Uploaded plant photo.

    Returns:
        A dict containing: result, error, offline_mode, analyzing.

    Raises:
        HTTPException(404) for an unknown session, 409 while another
        identification is running, 400/415 for an invalid upload.
    """
    store: SessionStore = request.app.state.session_store
    orchestrator: IdentificationOrchestrator = request.app.state.identification_orchestrator

    image = await read_image_upload(file)

    try:
        with store.analysis(session_id, image) as generation:
            outcome = await orchestrator.identify(image)
            state = store.apply_identification(session_id, outcome, generation)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SessionBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return {
        "session_id": session_id,
        "result": state.result.to_dict() if state.result else None,
        "error": state.error.to_dict() if state.error else None,
        "offline_mode": state.offline_mode,
        "analyzing": state.analyzing,
    }
