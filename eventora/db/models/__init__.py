"""Database models package."""
from eventora.db.models.user import User
from eventora.db.models.event import Event, EventCategory, EventStatus, LocationType
from eventora.db.models.registration import Registration, RegistrationStatus
from eventora.db.models.preferences import UserPreferences

__all__ = [
    "User",
    "Event",
    "EventCategory",
    "EventStatus",
    "LocationType",
    "Registration",
    "RegistrationStatus",
    "UserPreferences",
]
