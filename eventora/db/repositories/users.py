from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from eventora.db.models.user import User


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    """
    Retrieve user by ID.

    Args:
        db: Database session
        user_id: User's UUID

    Returns:
        User object if found, None otherwise
    """
    q = select(User).where(User.id == user_id)
    res = await db.execute(q)
    return res.scalars().first()


async def create_user(db: AsyncSession, user_id, email: str, name: Optional[str] = None, avatar: Optional[str] = None) -> User:
    """
    Insert the local copy of an identity-provider user.

    Args:
        db: Database session
        user_id: Identity-provider user id (the token's ``sub``)
        email: User's email address
        name: Display name
        avatar: Avatar URL

    Returns:
        Created User object
    """
    user = User(id=user_id, email=email, name=name, avatar=avatar)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
