from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.db.models.registration import Registration, RegistrationStatus


async def count_confirmed_registrations(db: AsyncSession, event_id) -> int:
    """Get the count of confirmed registrations for an event."""
    q = select(func.count(Registration.id)).where(
        Registration.event_id == event_id,
        Registration.status == RegistrationStatus.CONFIRMED,
    )
    res = await db.execute(q)
    return res.scalar() or 0


async def get_registration(db: AsyncSession, event_id, user_id) -> Optional[Registration]:
    """
    Get a user's registration for a specific event, whatever its status.

    Args:
        db: Database session
        event_id: Event's UUID
        user_id: User's UUID

    Returns:
        Registration object if found, None otherwise
    """
    q = select(Registration).where(
        Registration.event_id == event_id,
        Registration.user_id == user_id,
    )
    res = await db.execute(q)
    return res.scalars().first()


async def create_registration(db: AsyncSession, event_id, user_id) -> Registration:
    """Insert a CONFIRMED registration; the caller handles IntegrityError."""
    registration = Registration(event_id=event_id, user_id=user_id, status=RegistrationStatus.CONFIRMED)
    db.add(registration)
    await db.commit()
    await db.refresh(registration)
    return registration


async def set_registration_status(db: AsyncSession, registration: Registration, status: RegistrationStatus) -> Registration:
    registration.status = status
    await db.commit()
    await db.refresh(registration)
    return registration


async def list_confirmed_attendees(db: AsyncSession, event_id) -> List[Registration]:
    q = (
        select(Registration)
        .where(
            Registration.event_id == event_id,
            Registration.status == RegistrationStatus.CONFIRMED,
        )
        .order_by(Registration.registered_at.asc())
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().all()


async def list_user_registrations(db: AsyncSession, user_id) -> List[Registration]:
    q = (
        select(Registration)
        .where(
            Registration.user_id == user_id,
            Registration.status == RegistrationStatus.CONFIRMED,
        )
        .order_by(Registration.registered_at.desc())
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().all()
