"""
Helpers shared by the test modules: token minting, request bodies and an LLM stub.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt

from eventora.core.config import settings
from eventora.services.llm_service import LLMServiceError


def make_token(
    user_id,
    email: str,
    name: Optional[str] = None,
    expires_in: timedelta = timedelta(hours=1),
    audience: str = "authenticated",
    secret: Optional[str] = None,
) -> str:
    """Mint an access token shaped like the identity provider's."""
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
        "user_metadata": {"name": name} if name else {},
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def event_payload(**overrides) -> dict:
    """Valid camelCase body for POST /api/events."""
    start = datetime.now(timezone.utc) + timedelta(days=30)
    payload = {
        "title": "Python Meetup",
        "description": "Monthly meetup for Python developers",
        "categories": ["Technology", "Networking"],
        "locationType": "physical",
        "address": "1 Market Street",
        "city": "Nairobi",
        "country": "Kenya",
        "startTime": start.isoformat(),
        "endTime": (start + timedelta(hours=3)).isoformat(),
        "capacity": 50,
        "ticketPrice": 0,
    }
    payload.update(overrides)
    return payload


class StubLLM:
    """Stands in for GeminiService; replies with canned text or fails."""

    def __init__(self, reply: Optional[str] = None, error: Optional[str] = None):
        self.reply = reply
        self.error = error
        self.prompts = []

    @property
    def configured(self) -> bool:
        return self.error is None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise LLMServiceError(self.error)
        return self.reply
