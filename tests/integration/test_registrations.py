"""
Integration tests for event registration (RSVP) endpoints.
"""
import uuid
import pytest
from httpx import AsyncClient

from eventora.services import registration_service
from tests.utils import auth_header, make_token


@pytest.mark.integration
@pytest.mark.asyncio
class TestRegister:
    """Test registering for events."""

    async def test_register(self, client: AsyncClient, test_event, test_user, user_token):
        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "CONFIRMED"
        assert data["eventId"] == str(test_event.id)
        assert data["userId"] == str(test_user.id)

    async def test_register_twice_conflicts(self, client: AsyncClient, test_event, user_token):
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))
        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "You are already registered for this event"}

    async def test_cancel_and_reactivate_same_row(self, client: AsyncClient, test_event, user_token):
        first = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))
        cancelled = await client.delete(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))
        again = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert cancelled.status_code == 200
        assert cancelled.json()["message"] == "Registration cancelled successfully"
        assert cancelled.json()["data"]["status"] == "CANCELLED"
        assert again.status_code == 200
        assert again.json()["data"]["status"] == "CONFIRMED"
        assert again.json()["data"]["id"] == first.json()["data"]["id"]

    async def test_cannot_register_for_own_event(self, client: AsyncClient, test_event, organizer_token):
        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(organizer_token))

        assert response.status_code == 400
        assert response.json()["error"] == "You cannot register for your own event"

    async def test_unknown_event(self, client: AsyncClient, user_token):
        response = await client.post(f"/api/events/{uuid.uuid4()}/register", headers=auth_header(user_token))

        assert response.status_code == 404

    async def test_unpublished_event(self, client: AsyncClient, test_event, organizer_token, user_token):
        await client.patch(
            f"/api/events/{test_event.id}", headers=auth_header(organizer_token), json={"status": "CANCELLED"}
        )

        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 400
        assert response.json()["error"] == "Event is not published"

    async def test_event_full(self, client: AsyncClient, test_event, organizer_token, user_token):
        await client.patch(f"/api/events/{test_event.id}", headers=auth_header(organizer_token), json={"capacity": 1})
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        latecomer = make_token(uuid.uuid4(), "late@example.com", "Late Comer")
        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(latecomer))

        assert response.status_code == 400
        assert response.json()["error"] == "Event is full"

    async def test_duplicate_reported_before_full(self, client: AsyncClient, test_event, organizer_token, user_token):
        await client.patch(f"/api/events/{test_event.id}", headers=auth_header(organizer_token), json={"capacity": 1})
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 409

    async def test_concurrent_insert_conflicts(
        self, client: AsyncClient, test_event, test_registration, user_token, monkeypatch
    ):
        # The row lands between the lookup and the insert
        async def not_found_yet(session, event_id, user_id):
            return None

        monkeypatch.setattr(registration_service, "db_get_registration", not_found_yet)

        response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "You are already registered for this event"}


@pytest.mark.integration
@pytest.mark.asyncio
class TestCancel:
    """Test cancelling registrations."""

    async def test_cancel_without_registration(self, client: AsyncClient, test_event, user_token):
        response = await client.delete(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 404
        assert response.json()["error"] == "Registration not found"

    async def test_cancel_twice(self, client: AsyncClient, test_event, test_registration, user_token):
        await client.delete(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))
        response = await client.delete(f"/api/events/{test_event.id}/register", headers=auth_header(user_token))

        assert response.status_code == 404


@pytest.mark.integration
@pytest.mark.asyncio
class TestRegistrationQueries:
    """Test attendee lists, the caller's registrations and availability."""

    async def test_attendees_for_organizer(self, client: AsyncClient, test_event, test_registration, test_user, organizer_token):
        response = await client.get(f"/api/events/{test_event.id}/attendees", headers=auth_header(organizer_token))

        assert response.status_code == 200
        attendees = response.json()["data"]
        assert len(attendees) == 1
        assert attendees[0]["user"]["email"] == test_user.email
        assert attendees[0]["user"]["name"] == test_user.name

    async def test_attendees_forbidden_for_others(self, client: AsyncClient, test_event, user_token):
        response = await client.get(f"/api/events/{test_event.id}/attendees", headers=auth_header(user_token))

        assert response.status_code == 403
        assert response.json()["error"] == "Only the event organizer can view attendees"

    async def test_my_registrations(self, client: AsyncClient, test_events, user_token):
        for event in test_events[:2]:
            await client.post(f"/api/events/{event.id}/register", headers=auth_header(user_token))
        await client.delete(f"/api/events/{test_events[0].id}/register", headers=auth_header(user_token))

        response = await client.get("/api/events/my-registrations", headers=auth_header(user_token))

        assert response.status_code == 200
        registrations = response.json()["data"]
        assert len(registrations) == 1
        assert registrations[0]["event"]["title"] == test_events[1].title
        assert registrations[0]["event"]["creator"]["name"] == "Test Organizer"

    async def test_registration_status_anonymous(self, client: AsyncClient, test_event, test_registration):
        response = await client.get(f"/api/events/{test_event.id}/registration-status")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "isRegistered": False,
            "isFull": False,
            "confirmedCount": 1,
            "capacity": 50,
            "availableSpots": 49,
        }

    async def test_registration_status_for_attendee(self, client: AsyncClient, test_event, test_registration, user_token):
        response = await client.get(
            f"/api/events/{test_event.id}/registration-status", headers=auth_header(user_token)
        )

        assert response.json()["data"]["isRegistered"] is True

    async def test_registration_status_unlimited(self, client: AsyncClient, test_event, organizer_token):
        await client.patch(f"/api/events/{test_event.id}", headers=auth_header(organizer_token), json={"capacity": None})

        response = await client.get(f"/api/events/{test_event.id}/registration-status")

        data = response.json()["data"]
        assert data["capacity"] is None
        assert data["availableSpots"] is None
        assert data["isFull"] is False
