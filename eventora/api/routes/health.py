from fastapi import APIRouter
from typing import Dict

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check():
    """
    Liveness probe.

    Returns:
        Dict with status indicating the API is up
    """
    return {"status": "ok", "message": "Eventora API is running"}
