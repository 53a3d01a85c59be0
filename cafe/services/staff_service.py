import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import exceptions
from ..enums import UserRole
from ..models import User


logger = logging.getLogger(__name__)


class StaffService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def list_profiles(self, role: Optional[UserRole] = None) -> List[User]:
        query = select(User).order_by(User.created_at.desc())
        if role is not None:
            query = query.where(User.role == role)
        return (await self.db.execute(query)).scalars().all()


    async def update_role(self, user_id: str, role: UserRole, current_user: User) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise exceptions.NotFoundException("User not found.")

        if user.id == current_user.id and role != UserRole.ADMIN:
            raise exceptions.BadRequestException("You can't remove your own admin role.")

        user.role = role
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Role of %s set to %s by %s", user.id, role.value, current_user.id)
        return user
