"""
User data access object
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.models.user import User
from community_api.utils.id_generator import generate_user_id


class UserDAO:
    """User DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        firebase_uid: str,
        email: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None
    ) -> Optional[User]:
        """
        Create a user

        Args:
            session: database session
            firebase_uid: Firebase UID
            email: email address
            display_name: display name
            photo_url: avatar URL

        Returns:
            User: the new user, None when the UID or email is already taken
        """
        user = User(
            id=generate_user_id(),
            firebase_uid=firebase_uid,
            email=email,
            display_name=display_name,
            photo_url=photo_url,
        )

        try:
            async with session.begin_nested():
                session.add(user)
                await session.flush()
        except IntegrityError:
            return None

        return user

    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        result = await session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_firebase_uid(session: AsyncSession, firebase_uid: str) -> Optional[User]:
        """Get a user by Firebase UID"""
        result = await session.execute(
            select(User).where(User.firebase_uid == firebase_uid)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> Optional[User]:
        """Get a user by email"""
        result = await session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def update(session: AsyncSession, user: User, **fields) -> User:
        """
        Update user columns

        None values are skipped so partial provider claims never blank out a profile
        """
        for key, value in fields.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        await session.flush()
        return user
