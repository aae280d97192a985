"""
Event queries: creation, lookup, filtered listing, update and deletion.

Listing results are cached; every mutation clears the ``events:*`` keys.
"""
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import select, func, or_, delete
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.cache.cache_decorators import cached, invalidate_prefix
from eventora.core.config import settings
from eventora.db.models.event import Event, EventCategory
from eventora.db.models.registration import Registration
from eventora.schemas import EventOut

SORT_COLUMNS = {
    "startTime": Event.start_time,
    "date": Event.start_time,
    "price": Event.ticket_price,
    "createdAt": Event.created_at,
    "title": Event.title,
}


async def invalidate_event_caches() -> None:
    await invalidate_prefix("events")


def _apply_filters(
    q,
    status: Optional[str] = None,
    search: Optional[str] = None,
    categories: Optional[List[str]] = None,
    city: Optional[str] = None,
    country: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    location_type: Optional[str] = None,
    creator_id: Optional[str] = None,
):
    if status:
        q = q.where(Event.status == status)
    if search:
        pattern = f"%{search}%"
        q = q.where(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))
    if categories:
        wanted = [c.strip().lower() for c in categories if c.strip()]
        if wanted:
            q = q.where(Event.category_links.any(func.lower(EventCategory.name).in_(wanted)))
    if city:
        q = q.where(Event.city.ilike(f"%{city}%"))
    if country:
        q = q.where(Event.country.ilike(f"%{country}%"))
    if start_date:
        q = q.where(Event.start_time >= start_date)
    if end_date:
        q = q.where(Event.start_time <= end_date)
    if min_price is not None:
        q = q.where(Event.ticket_price >= min_price)
    if max_price is not None:
        q = q.where(Event.ticket_price <= max_price)
    if location_type:
        q = q.where(Event.location_type == location_type)
    if creator_id:
        q = q.where(Event.creator_id == creator_id)
    return q


async def create_event(db: AsyncSession, data: Dict, creator_id) -> Event:
    """
    Create a new event and invalidate events cache.

    Args:
        db: Database session
        data: Column values (``categories`` is a list of labels)
        creator_id: UUID of user creating the event

    Returns:
        Created Event object
    """
    ev = Event(**data, creator_id=creator_id)
    db.add(ev)
    await db.commit()

    await invalidate_event_caches()

    return await get_event(db, ev.id)


async def get_event(db: AsyncSession, event_id) -> Optional[Event]:
    q = select(Event).where(Event.id == event_id).execution_options(populate_existing=True)
    res = await db.execute(q)
    return res.scalars().first()


@cached('events:list', expire=settings.EVENTS_CACHE_TTL)
async def list_events(
    db: AsyncSession,
    limit: int = 6,
    offset: int = 0,
    sort_by: str = "startTime",
    sort_order: str = "asc",
    **filters,
) -> List[dict]:
    """
    List events with pagination, filtering, and search support.
    Returns a list of event dictionaries (camelCase keys) for caching compatibility.
    """
    column = SORT_COLUMNS.get(sort_by, Event.start_time)
    order = column.desc() if sort_order == "desc" else column.asc()
    q = _apply_filters(select(Event), **filters).order_by(order, Event.id)

    q = q.limit(limit).offset(offset)

    res = await db.execute(q)
    events = res.scalars().all()

    return [EventOut.model_validate(ev).model_dump(mode="json", by_alias=True) for ev in events]


@cached('events:count', expire=settings.EVENTS_CACHE_TTL)
async def count_events(db: AsyncSession, **filters) -> int:
    """
    Count total events matching the given filters.
    Used for pagination metadata.
    """
    q = _apply_filters(select(func.count(Event.id)), **filters)
    res = await db.execute(q)
    return res.scalar() or 0


async def update_event(db: AsyncSession, ev: Event, changes: Dict) -> Event:
    for field, value in changes.items():
        setattr(ev, field, value)
    await db.commit()

    await invalidate_event_caches()

    return await get_event(db, ev.id)


async def delete_event(db: AsyncSession, ev: Event) -> None:
    """Delete an event together with its registrations and category labels."""
    await db.execute(delete(Registration).where(Registration.event_id == ev.id))
    await db.delete(ev)
    await db.commit()

    await invalidate_event_caches()
