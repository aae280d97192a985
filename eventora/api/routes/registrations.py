from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.auth import get_current_user, get_optional_user
from eventora.db.session import get_session
from eventora.schemas import (
    ApiResponse,
    AttendeeOut,
    MyRegistrationOut,
    RegistrationOut,
    RegistrationStatusOut,
)
from eventora.services.registration_service import RegistrationService

router = APIRouter(prefix="/events", tags=["registrations"])


def get_registration_service(session: AsyncSession = Depends(get_session)) -> RegistrationService:
    return RegistrationService(session)


# Declared on a router mounted ahead of /events/{event_id}
@router.get("/my-registrations", response_model=ApiResponse[List[MyRegistrationOut]])
async def my_registrations_endpoint(
    user=Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    registrations = await registration_service.list_my_registrations(user)
    return ApiResponse(data=[MyRegistrationOut.model_validate(r) for r in registrations])


@router.post("/{event_id}/register", response_model=ApiResponse[RegistrationOut])
async def register_endpoint(
    event_id: UUID,
    response: Response,
    user=Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    """
    Register the caller for an event.

    Returns 201 for a new registration and 200 when a cancelled one is
    reactivated.
    """
    registration, created = await registration_service.register(event_id, user)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ApiResponse(
        data=RegistrationOut.model_validate(registration),
        message="Successfully registered for event",
    )


@router.delete("/{event_id}/register", response_model=ApiResponse[RegistrationOut])
async def cancel_registration_endpoint(
    event_id: UUID,
    user=Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    registration = await registration_service.cancel(event_id, user)
    return ApiResponse(
        data=RegistrationOut.model_validate(registration),
        message="Registration cancelled successfully",
    )


@router.get("/{event_id}/attendees", response_model=ApiResponse[List[AttendeeOut]])
async def attendees_endpoint(
    event_id: UUID,
    user=Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    attendees = await registration_service.list_attendees(event_id, user)
    return ApiResponse(data=[AttendeeOut.model_validate(a) for a in attendees])


@router.get("/{event_id}/registration-status", response_model=ApiResponse[RegistrationStatusOut])
async def registration_status_endpoint(
    event_id: UUID,
    user=Depends(get_optional_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    result = await registration_service.registration_status(event_id, user)
    return ApiResponse(data=RegistrationStatusOut(**result))
