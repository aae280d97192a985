"""
Repository layer for database operations.

Provides async functions for CRUD operations on User, Event, Registration
and UserPreferences entities. Event listings are cached.
"""
from eventora.db.repositories.users import create_user, get_user
from eventora.db.repositories.events import (
    create_event,
    get_event,
    list_events,
    count_events,
    update_event,
    delete_event,
    invalidate_event_caches,
)
from eventora.db.repositories.registrations import (
    count_confirmed_registrations,
    get_registration,
    create_registration,
    set_registration_status,
    list_confirmed_attendees,
    list_user_registrations,
)
from eventora.db.repositories.preferences import get_preferences, upsert_preferences, delete_preferences

__all__ = [
    "create_user",
    "get_user",
    "create_event",
    "get_event",
    "list_events",
    "count_events",
    "update_event",
    "delete_event",
    "invalidate_event_caches",
    "count_confirmed_registrations",
    "get_registration",
    "create_registration",
    "set_registration_status",
    "list_confirmed_attendees",
    "list_user_registrations",
    "get_preferences",
    "upsert_preferences",
    "delete_preferences",
]
