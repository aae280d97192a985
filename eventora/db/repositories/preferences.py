from typing import Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.db.models.preferences import UserPreferences


async def get_preferences(db: AsyncSession, user_id) -> Optional[UserPreferences]:
    q = select(UserPreferences).where(UserPreferences.user_id == user_id)
    res = await db.execute(q)
    return res.scalars().first()


async def upsert_preferences(db: AsyncSession, user_id, values: Dict) -> UserPreferences:
    """
    Create the user's preferences row or overwrite the existing one.

    Args:
        db: Database session
        user_id: Owner's UUID
        values: Column values (interests, location, notification_settings, privacy_settings)

    Returns:
        The stored UserPreferences object
    """
    prefs = await get_preferences(db, user_id)
    if prefs is None:
        prefs = UserPreferences(user_id=user_id, **values)
        db.add(prefs)
    else:
        for field, value in values.items():
            setattr(prefs, field, value)
    await db.commit()
    await db.refresh(prefs)
    return prefs


async def delete_preferences(db: AsyncSession, prefs: UserPreferences) -> None:
    await db.delete(prefs)
    await db.commit()
