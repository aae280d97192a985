from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.db.session import get_session
from eventora.db.models.user import User
from eventora.db.repositories import create_user, get_user
from eventora.core.security import decode_access_token, display_name_from_claims, avatar_from_claims
from eventora.core.logging import logger

# auto_error is disabled so that a missing header yields our own 401 envelope
security = HTTPBearer(auto_error=False)


async def _sync_user(session: AsyncSession, payload: dict) -> User:
    """Return the local user for the token, creating the row on first sight."""
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await get_user(session, user_id)
    if user:
        return user

    email = payload.get("email")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = await create_user(
            session,
            user_id=user_id,
            email=email,
            name=display_name_from_claims(payload),
            avatar=avatar_from_claims(payload),
        )
    except SQLAlchemyError as e:
        await session.rollback()
        # A concurrent first request for the same subject may have inserted the row
        user = await get_user(session, user_id)
        if user:
            return user
        logger.error(f"Error syncing user {user_id} to database: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"Created user in database: {email}")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    """
    Resolve the caller from an identity-provider bearer token.

    Args:
        credentials: HTTP Bearer credentials containing the JWT token
        session: Database session (injected)

    Returns:
        User object

    Raises:
        HTTPException: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authorization token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return await _sync_user(session, payload)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> Optional[User]:
    """Like get_current_user, but anonymous or invalid callers resolve to None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await get_current_user(credentials, session)
    except HTTPException:
        return None
