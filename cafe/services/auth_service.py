import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio.session import AsyncSession

from ..enums import UserRole
from ..models import User


logger = logging.getLogger(__name__)


class AuthService:
    """
    Service class mapping verified token claims onto local profiles.
    """

    async def get_user(self, user_id: str, db: AsyncSession):
        """
        Asynchronously retrieves a profile by its auth subject, or ``None``.
        """

        return await db.get(User, user_id)


    async def get_or_create_profile(self, claims: dict, db: AsyncSession) -> User:
        """
        Return the profile for the token subject, creating a customer profile
        the first time an account is seen.
        """

        user_id = claims["sub"]
        user = await self.get_user(user_id, db)
        if user:
            return user

        metadata = claims.get("user_metadata") or {}
        new_user = User(
            id=user_id,
            email=claims.get("email"),
            full_name=metadata.get("full_name"),
            phone=claims.get("phone") or metadata.get("phone"),
            role=UserRole.CUSTOMER,
        )

        try:
            db.add(new_user)
            await db.commit()
            await db.refresh(new_user)
            logger.info("Created profile for %s", user_id)
            return new_user

        except IntegrityError:
            # another request for the same subject created it first
            await db.rollback()
            return await self.get_user(user_id, db)


    async def update_user_profile(self, user: User, user_data: dict, session: AsyncSession):
        """
        Asynchronously updates the profile information of a user with the provided data.
        """

        for key, value in user_data.items():
            setattr(user, key, value)

        await session.commit()
        await session.refresh(user)
        return user
