from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from controllers.identification_controller import identify_plant

router = APIRouter()


@router.post("/sessions/{session_id}/identify")
async def post_identify(request: Request, session_id: str, file: UploadFile = File(...)):
    """Identify the plant in the uploaded photo and attach care instructions."""
    try:
        return await identify_plant(request, session_id, file)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
