from typing import List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.core.logging import logger
from eventora.db.models.event import Event, EventStatus
from eventora.db.models.registration import Registration, RegistrationStatus
from eventora.db.models.user import User
from eventora.db.repositories import (
    get_event as db_get_event,
    count_confirmed_registrations as db_count_confirmed,
    get_registration as db_get_registration,
    create_registration as db_create_registration,
    set_registration_status as db_set_registration_status,
    list_confirmed_attendees as db_list_confirmed_attendees,
    list_user_registrations as db_list_user_registrations,
    invalidate_event_caches,
)

ALREADY_REGISTERED = "You are already registered for this event"


class RegistrationService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_event_or_404(self, event_id) -> Event:
        event = await db_get_event(self.session, event_id)
        if not event:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        return event

    async def register(self, event_id, user: User) -> Tuple[Registration, bool]:
        """
        Register the user for an event.

        Args:
            event_id: Event's UUID
            user: Registering user

        Returns:
            Tuple of (registration, created); ``created`` is False when a
            cancelled registration was reactivated

        Raises:
            HTTPException: 404 unknown event, 400 when the event is not open to
                the user or is full, 409 when already registered
        """
        event = await self._get_event_or_404(event_id)

        if event.status != EventStatus.PUBLISHED:
            raise HTTPException(status_code=400, detail="Event is not published")

        if event.creator_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot register for your own event")

        existing = await db_get_registration(self.session, event.id, user.id)
        if existing and existing.status == RegistrationStatus.CONFIRMED:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_REGISTERED)

        if event.capacity:
            confirmed = await db_count_confirmed(self.session, event.id)
            if confirmed >= event.capacity:
                raise HTTPException(status_code=400, detail="Event is full")

        if existing:
            registration = await db_set_registration_status(self.session, existing, RegistrationStatus.CONFIRMED)
            await invalidate_event_caches()
            logger.info(f"Reactivated registration for user {user.id} to event {event.id}")
            return registration, False

        try:
            registration = await db_create_registration(self.session, event.id, user.id)
        except IntegrityError:
            await self.session.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_REGISTERED)

        await invalidate_event_caches()
        logger.info(f"User {user.id} registered for event {event.id}")
        return registration, True

    async def cancel(self, event_id, user: User) -> Registration:
        registration = await db_get_registration(self.session, event_id, user.id)
        if not registration or registration.status == RegistrationStatus.CANCELLED:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")

        registration = await db_set_registration_status(self.session, registration, RegistrationStatus.CANCELLED)
        await invalidate_event_caches()
        logger.info(f"User {user.id} cancelled registration for event {event_id}")
        return registration

    async def list_attendees(self, event_id, user: User) -> List[Registration]:
        event = await self._get_event_or_404(event_id)
        if event.creator_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the event organizer can view attendees",
            )

        attendees = await db_list_confirmed_attendees(self.session, event.id)
        logger.info(f"Fetched {len(attendees)} attendees for event {event.id}")
        return attendees

    async def list_my_registrations(self, user: User) -> List[Registration]:
        registrations = await db_list_user_registrations(self.session, user.id)

        valid = []
        for registration in registrations:
            if registration.event is None:
                logger.warning(f"Registration {registration.id} has no event (orphaned)")
                continue
            valid.append(registration)

        logger.info(f"Fetched {len(valid)} valid registrations for user {user.id}")
        return valid

    async def registration_status(self, event_id, user: Optional[User]) -> dict:
        event = await self._get_event_or_404(event_id)

        confirmed = await db_count_confirmed(self.session, event.id)
        is_full = confirmed >= event.capacity if event.capacity else False

        is_registered = False
        if user is not None:
            registration = await db_get_registration(self.session, event.id, user.id)
            is_registered = registration is not None and registration.status == RegistrationStatus.CONFIRMED

        return {
            "is_registered": is_registered,
            "is_full": is_full,
            "confirmed_count": confirmed,
            "capacity": event.capacity,
            "available_spots": max(0, event.capacity - confirmed) if event.capacity else None,
        }
