from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.auth import get_current_user
from eventora.db.session import get_session
from eventora.schemas import ApiResponse, MessageResponse, PreferencesIn, PreferencesOut
from eventora.services.preferences_service import PreferencesService

router = APIRouter(prefix="/user", tags=["preferences"])


def get_preferences_service(session: AsyncSession = Depends(get_session)) -> PreferencesService:
    return PreferencesService(session)


@router.post("/preferences", response_model=ApiResponse[PreferencesOut])
async def save_preferences_endpoint(
    payload: PreferencesIn,
    user=Depends(get_current_user),
    preferences_service: PreferencesService = Depends(get_preferences_service)
):
    prefs = await preferences_service.save(payload, user)
    return ApiResponse(data=PreferencesOut.model_validate(prefs), message="Preferences saved successfully")


@router.get("/preferences", response_model=ApiResponse[Optional[PreferencesOut]])
async def get_preferences_endpoint(
    user=Depends(get_current_user),
    preferences_service: PreferencesService = Depends(get_preferences_service)
):
    prefs = await preferences_service.get(user)
    return ApiResponse(data=PreferencesOut.model_validate(prefs) if prefs else None)


@router.delete("/preferences", response_model=MessageResponse)
async def delete_preferences_endpoint(
    user=Depends(get_current_user),
    preferences_service: PreferencesService = Depends(get_preferences_service)
):
    await preferences_service.delete(user)
    return MessageResponse(message="Preferences deleted successfully")
