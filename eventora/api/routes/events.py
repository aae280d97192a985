from datetime import datetime
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.auth import get_current_user
from eventora.db.models.event import EventStatus, LocationType
from eventora.db.session import get_session
from eventora.schemas import (
    ApiResponse,
    EventCreate,
    EventList,
    EventOut,
    EventUpdate,
    ImageUploadOut,
    MessageResponse,
    PaginationMetadata,
)
from eventora.services.event_service import EventService
from eventora.services.upload_service import save_event_image
from eventora.core.logging import logger

router = APIRouter(prefix="/events", tags=["events"])

LIST_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=120"


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


@router.post("/upload-image", response_model=ApiResponse[ImageUploadOut])
async def upload_event_image_endpoint(
    image: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
):
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    stored = await save_event_image(image)
    return ApiResponse(data=ImageUploadOut(**stored), message="Image uploaded successfully")


@router.post("", response_model=ApiResponse[EventOut], status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: EventCreate,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.create_event(payload, user)
    return ApiResponse(data=EventOut.model_validate(ev), message="Event created successfully")


@router.get("", response_model=ApiResponse[EventList])
async def list_events_endpoint(
    response: Response,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(6, ge=1, le=100, description="Number of events per page"),
    search: Optional[str] = Query(None, description="Search in event title and description"),
    categories: Optional[str] = Query(None, description="Comma-separated categories, any may match"),
    city: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    location_type: Optional[LocationType] = Query(None, alias="locationType"),
    creator_id: Optional[UUID] = Query(None, alias="creatorId"),
    event_status: EventStatus = Query(EventStatus.PUBLISHED, alias="status"),
    sort_by: str = Query("startTime", alias="sortBy", pattern="^(startTime|date|price|createdAt|title)$"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
    event_service: EventService = Depends(get_event_service)
):
    """
    List events with pagination, filtering, and search support.
    - search: case-insensitive match on title or description
    - categories: comma-separated list, an event matching any is returned
    - city / country: case-insensitive partial match
    - startDate / endDate: bounds on the event start time
    - minPrice / maxPrice: ticket price range
    - status: defaults to PUBLISHED
    """
    category_list = [c for c in (categories or "").split(",") if c.strip()] or None

    total, events = await event_service.list_events_paginated(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        status=event_status.value,
        search=search,
        categories=category_list,
        city=city,
        country=country,
        start_date=start_date,
        end_date=end_date,
        min_price=min_price,
        max_price=max_price,
        location_type=location_type.value if location_type else None,
        creator_id=creator_id,
    )

    total_pages = (total + limit - 1) // limit
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    logger.debug(f"Listed {len(events)} of {total} events (page {page})")

    return ApiResponse(
        data=EventList(
            events=[EventOut.model_validate(e) for e in events],
            pagination=PaginationMetadata(
                page=page,
                limit=limit,
                total=total,
                total_pages=total_pages,
                has_more=page * limit < total,
            ),
        )
    )


@router.get("/{event_id}", response_model=ApiResponse[EventOut])
async def get_event_detail(
    event_id: UUID,
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.get_event_or_404(event_id)
    return ApiResponse(data=EventOut.model_validate(ev))


@router.patch("/{event_id}", response_model=ApiResponse[EventOut])
async def update_event_endpoint(
    event_id: UUID,
    payload: EventUpdate,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.update_event(event_id, payload, user)
    return ApiResponse(data=EventOut.model_validate(ev), message="Event updated successfully")


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event_endpoint(
    event_id: UUID,
    user=Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(event_id, user)
    return MessageResponse(message="Event deleted successfully")
