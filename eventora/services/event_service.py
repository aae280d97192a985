from datetime import datetime, timezone
from typing import List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.core.config import settings
from eventora.core.logging import logger
from eventora.db.models.event import Event, EventStatus
from eventora.db.models.user import User
from eventora.db.repositories import (
    create_event as db_create_event,
    get_event as db_get_event,
    list_events as db_list_events,
    count_events as db_count_events,
    update_event as db_update_event,
    delete_event as db_delete_event,
)
from eventora.schemas import EventCreate, EventUpdate, to_utc


class EventService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_event(self, payload: EventCreate, user: User) -> Event:
        data = payload.model_dump(exclude_unset=False)
        data["cover_image"] = data.get("cover_image") or {"url": "", "alt": ""}
        data["timezone"] = data.get("timezone") or settings.DEFAULT_TIMEZONE
        data["ticket_price"] = data.get("ticket_price") or 0
        data["status"] = EventStatus.PUBLISHED

        event = await db_create_event(self.session, data, user.id)
        logger.info(f"Event created: {event.id} - \"{event.title}\"")
        return event

    async def get_event(self, event_id) -> Optional[Event]:
        return await db_get_event(self.session, event_id)

    async def get_event_or_404(self, event_id) -> Event:
        event = await self.get_event(event_id)
        if not event:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        return event

    async def list_events_paginated(
        self,
        page: int,
        limit: int,
        sort_by: str = "startTime",
        sort_order: str = "asc",
        status: Optional[str] = EventStatus.PUBLISHED.value,
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
    ) -> Tuple[int, List[dict]]:
        """
        List events with pagination support.
        Returns tuple of (total_count, events).
        """
        filters = dict(
            status=status,
            search=search,
            categories=categories,
            city=city,
            country=country,
            start_date=to_utc(start_date),
            end_date=to_utc(end_date),
            min_price=min_price,
            max_price=max_price,
            location_type=location_type,
            creator_id=creator_id,
        )
        total = await db_count_events(self.session, **filters)
        events = await db_list_events(
            self.session,
            limit=limit,
            offset=(page - 1) * limit,
            sort_by=sort_by,
            sort_order=sort_order,
            **filters,
        )
        return total, events

    async def _get_owned_event(self, event_id, user: User, action: str) -> Event:
        event = await self.get_event_or_404(event_id)
        if event.creator_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"You are not authorized to {action} this event",
            )
        return event

    async def update_event(self, event_id, payload: EventUpdate, user: User) -> Event:
        event = await self._get_owned_event(event_id, user, "update")

        changes = payload.model_dump(exclude_unset=True)
        start = changes.get("start_time", event.start_time)
        end = changes.get("end_time", event.end_time)
        if ("start_time" in changes or "end_time" in changes) and _naive_utc(end) <= _naive_utc(start):
            raise HTTPException(status_code=400, detail="endTime must be after startTime")
        for required in ("title", "description", "city", "country", "start_time", "end_time", "location_type"):
            if required in changes and changes[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
        if "categories" in changes and changes["categories"] is None:
            changes["categories"] = []

        event = await db_update_event(self.session, event, changes)
        logger.info(f"Event updated: {event.id}")
        return event

    async def delete_event(self, event_id, user: User) -> None:
        event = await self._get_owned_event(event_id, user, "delete")
        await db_delete_event(self.session, event)
        logger.info(f"Event deleted: {event_id}")


def _naive_utc(value: datetime) -> datetime:
    """Compare stored (possibly naive UTC) and incoming (aware) datetimes on one footing."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
