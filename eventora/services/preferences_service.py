from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.core.logging import logger
from eventora.db.models.preferences import UserPreferences
from eventora.db.models.user import User
from eventora.db.repositories import (
    get_preferences as db_get_preferences,
    upsert_preferences as db_upsert_preferences,
    delete_preferences as db_delete_preferences,
)
from eventora.schemas import PreferencesIn


class PreferencesService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, payload: PreferencesIn, user: User) -> UserPreferences:
        values = payload.model_dump(mode="json", exclude={"interests"})
        values["interests"] = payload.interests
        prefs = await db_upsert_preferences(self.session, user.id, values)
        logger.info(f"User preferences saved for user: {user.id}")
        return prefs

    async def get(self, user: User) -> Optional[UserPreferences]:
        return await db_get_preferences(self.session, user.id)

    async def delete(self, user: User) -> None:
        prefs = await db_get_preferences(self.session, user.id)
        if prefs is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preferences not found")
        await db_delete_preferences(self.session, prefs)
        logger.info(f"User preferences deleted for user: {user.id}")
