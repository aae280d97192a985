from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Generic, List, Literal, Optional, TypeVar
from uuid import UUID
from datetime import datetime, timezone
from eventora.db.models.event import EventStatus, LocationType
from eventora.db.models.registration import RegistrationStatus

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ApiResponse(BaseModel, Generic[T]):
    """Uniform success envelope."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserSummary(CamelModel):
    id: UUID
    name: Optional[str] = None
    email: str
    avatar: Optional[str] = None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class Coordinates(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class CoverImage(CamelModel):
    url: str = ""
    alt: str = ""
    photographer: Optional[str] = None
    source: Optional[str] = None


class EventCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    cover_image: Optional[CoverImage] = None
    location_type: LocationType = LocationType.physical
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    virtual_link: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    timezone: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    ticket_price: Optional[float] = Field(default=None, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_datetimes(cls, value):
        return to_utc(value)

    @model_validator(mode="after")
    def check_required_fields(self):
        required = (self.title, self.description, self.city, self.country, self.start_time, self.end_time)
        if any(value is None or (isinstance(value, str) and not value.strip()) for value in required):
            raise ValueError(
                "Missing required fields: title, description, city, country, startTime, endTime"
            )
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class EventUpdate(CamelModel):
    """Partial update; only the fields present in the request are applied."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    categories: Optional[List[str]] = None
    cover_image: Optional[CoverImage] = None
    location_type: Optional[LocationType] = None
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, min_length=1)
    country: Optional[str] = Field(default=None, min_length=1)
    coordinates: Optional[Coordinates] = None
    virtual_link: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    timezone: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    ticket_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[EventStatus] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_datetimes(cls, value):
        return to_utc(value)


class EventOut(CamelModel):
    id: UUID
    title: str
    description: str
    categories: List[str] = Field(default_factory=list)
    cover_image: Optional[CoverImage] = None
    location_type: LocationType
    address: Optional[str] = None
    city: str
    country: str
    coordinates: Optional[Coordinates] = None
    virtual_link: Optional[str] = None
    start_time: datetime
    end_time: datetime
    timezone: str
    capacity: Optional[int] = None
    ticket_price: float = 0
    status: EventStatus
    creator_id: UUID
    creator: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value):
        return to_utc(value)


class PaginationMetadata(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class EventList(CamelModel):
    events: List[EventOut]
    pagination: PaginationMetadata


class ImageUploadOut(CamelModel):
    url: str
    filename: str
    size: int
    mimetype: str


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------

class RegistrationOut(CamelModel):
    id: UUID
    event_id: UUID
    user_id: UUID
    status: RegistrationStatus
    registered_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("registered_at", "updated_at")
    @classmethod
    def as_utc(cls, value):
        return to_utc(value)


class AttendeeOut(RegistrationOut):
    user: UserSummary


class MyRegistrationOut(RegistrationOut):
    event: EventOut


class RegistrationStatusOut(CamelModel):
    is_registered: bool
    is_full: bool
    confirmed_count: int
    capacity: Optional[int] = None
    available_spots: Optional[int] = None


# ---------------------------------------------------------------------------
# User preferences
# ---------------------------------------------------------------------------

class PreferenceLocation(CamelModel):
    city: str
    country: str
    coordinates: Optional[Coordinates] = None


class NotificationSettings(CamelModel):
    email: bool = True
    push: bool = False
    event_reminders: bool = True
    weekly_digest: bool = False
    new_recommendations: bool = True


class PrivacySettings(CamelModel):
    profile_visibility: Literal["public", "private"] = "public"
    show_location: bool = True


class PreferencesIn(CamelModel):
    interests: List[str] = Field(default_factory=list, validate_default=True)
    location: Optional[PreferenceLocation] = None
    notification_settings: Optional[NotificationSettings] = None
    privacy_settings: Optional[PrivacySettings] = None

    @field_validator("interests")
    @classmethod
    def require_interest(cls, value: List[str]) -> List[str]:
        interests = [item.strip() for item in value if item and item.strip()]
        if not interests:
            raise ValueError("At least one interest is required")
        return interests


class PreferencesOut(CamelModel):
    id: UUID
    user_id: UUID
    interests: List[str]
    location: Optional[PreferenceLocation] = None
    notification_settings: Optional[NotificationSettings] = None
    privacy_settings: Optional[PrivacySettings] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# AI generation
# ---------------------------------------------------------------------------

PROMPT_MIN_LENGTH = 10
PROMPT_MAX_LENGTH = 500


class GenerateEventRequest(BaseModel):
    prompt: Any = Field(default=None, validate_default=True)

    @field_validator("prompt")
    @classmethod
    def check_prompt(cls, value):
        if not value or not isinstance(value, str):
            raise ValueError("Prompt is required and must be a string")
        if len(value.strip()) < PROMPT_MIN_LENGTH:
            raise ValueError(f"Prompt must be at least {PROMPT_MIN_LENGTH} characters long")
        if len(value) > PROMPT_MAX_LENGTH:
            raise ValueError(f"Prompt must be less than {PROMPT_MAX_LENGTH} characters")
        return value


class SuggestedLocation(CamelModel):
    city: str
    country: str
    location_type: LocationType = LocationType.physical


class GeneratedBanner(CamelModel):
    image_data: str
    prompt: str
    source: Literal["huggingface-sdxl"] = "huggingface-sdxl"


class StockImage(CamelModel):
    id: str
    url: str
    thumb: str
    photographer: str
    photographer_url: str
    alt: str
    download_url: str = ""


class EventDraft(CamelModel):
    title: str
    description: str
    categories: List[str]
    suggested_location: SuggestedLocation
    suggested_date: str
    estimated_duration: float
    suggested_capacity: int
    keywords: List[str]


class GeneratedEvent(EventDraft):
    ai_generated_banner: Optional[GeneratedBanner] = None
    cover_images: List[StockImage] = Field(default_factory=list)
    fallback: bool = False


class GenerateBannerRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_fields(self):
        if not self.title or not self.description:
            raise ValueError("Title and description are required")
        if not self.keywords:
            raise ValueError("Keywords array is required")
        return self


class TrackDownloadRequest(CamelModel):
    download_url: str
