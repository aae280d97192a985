"""
Validation of access tokens issued by the identity provider (Supabase).
"""
from typing import Dict, Optional
from jose import jwt, JWTError
from eventora.core.config import settings


def decode_access_token(token: str) -> Dict:
    """
    Decode and validate an identity-provider access token.

    Args:
        token: JWT token taken from the Authorization header

    Returns:
        Decoded token claims

    Raises:
        ValueError: If token is invalid, expired, or issued for another audience
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise ValueError("Token has expired")
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}")

    if not payload.get("sub"):
        raise ValueError("Invalid token payload: missing 'sub' field")

    return payload


def display_name_from_claims(payload: Dict) -> str:
    """Pick a display name from token metadata, falling back to the email local part."""
    metadata = payload.get("user_metadata") or {}
    name = metadata.get("name") or metadata.get("full_name")
    if name:
        return name
    email = payload.get("email") or ""
    if "@" in email:
        return email.split("@")[0]
    return "User"


def avatar_from_claims(payload: Dict) -> Optional[str]:
    metadata = payload.get("user_metadata") or {}
    return metadata.get("avatar_url") or metadata.get("picture")
