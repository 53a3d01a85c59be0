import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import exceptions
from ..models import Coupon, CouponUsage, User
from ..schemas.coupon import CouponCreate, CouponUpdate


logger = logging.getLogger(__name__)


def canonical_code(code: str) -> str:
    return code.strip().upper()


class CouponService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def get_active_coupon(self, code: str, now: Optional[datetime] = None) -> Coupon:
        """
        Find an active, unexpired coupon by code (case-insensitive).

        Raises:
            InvalidCouponException: If no such coupon exists.
        """
        now = now or datetime.utcnow()
        stmt = select(Coupon).where(
            and_(
                Coupon.code == canonical_code(code),
                Coupon.is_active == True,  # noqa: E712
                or_(Coupon.expires_at.is_(None), Coupon.expires_at > now),
            )
        )
        coupon = (await self.db.execute(stmt)).scalars().first()

        if not coupon:
            raise exceptions.InvalidCouponException()

        return coupon


    async def get_usage_count(self, coupon_id: int, user_id: str) -> int:
        stmt = select(CouponUsage.used_count).filter_by(coupon_id=coupon_id, user_id=user_id)
        used = (await self.db.execute(stmt)).scalar_one_or_none()
        return used or 0


    async def check_eligibility(self, coupon: Coupon, user: Optional[User]) -> None:
        """
        Enforce the per-user usage limit. Limited coupons need an account so
        that usage can be counted.
        """
        if coupon.usage_limit_per_user is None:
            return

        if user is None:
            raise exceptions.CouponLoginRequiredException()

        used = await self.get_usage_count(coupon.id, user.id)
        if used >= coupon.usage_limit_per_user:
            raise exceptions.CouponUsageExhaustedException()


    async def resolve_for_user(self, code: str, user: Optional[User]) -> Coupon:
        coupon = await self.get_active_coupon(code)
        await self.check_eligibility(coupon, user)
        return coupon


    async def record_usage(self, coupon_id: int, user_id: str) -> None:
        """
        Increment the usage counter inside the caller's transaction. Does not commit.
        """
        stmt = select(CouponUsage).filter_by(coupon_id=coupon_id, user_id=user_id)
        usage = (await self.db.execute(stmt)).scalars().first()

        if usage:
            usage.used_count = CouponUsage.used_count + 1
        else:
            self.db.add(CouponUsage(coupon_id=coupon_id, user_id=user_id, used_count=1))

        await self.db.flush()


    async def list_offers(self, now: Optional[datetime] = None) -> List[Coupon]:
        now = now or datetime.utcnow()
        stmt = (
            select(Coupon)
            .where(Coupon.is_active == True)  # noqa: E712
            .where(or_(Coupon.expires_at.is_(None), Coupon.expires_at > now))
            .order_by(Coupon.created_at.desc())
        )
        return (await self.db.execute(stmt)).scalars().all()


    # Admin management

    async def list_coupons(self) -> List[Coupon]:
        result = await self.db.execute(select(Coupon).order_by(Coupon.created_at.desc()))
        return result.scalars().all()


    async def get_coupon(self, coupon_id: int) -> Coupon:
        coupon = await self.db.get(Coupon, coupon_id)
        if not coupon:
            raise exceptions.NotFoundException(f"Coupon with ID {coupon_id} not found")
        return coupon


    async def create_coupon(self, data: CouponCreate) -> Coupon:
        existing = await self.db.execute(select(func.count()).select_from(Coupon).filter_by(code=data.code))
        if existing.scalar():
            raise exceptions.CouponExistsException()

        coupon = Coupon(**data.model_dump())
        self.db.add(coupon)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise exceptions.CouponExistsException()

        await self.db.refresh(coupon)
        logger.info("Coupon %s created", coupon.code)
        return coupon


    async def update_coupon(self, coupon_id: int, data: CouponUpdate) -> Coupon:
        coupon = await self.get_coupon(coupon_id)

        # exclude fields that have not been explicitly set
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(coupon, field, value)

        if coupon.discount_type == "percentage" and coupon.discount_value is not None and float(coupon.discount_value) > 100:
            await self.db.rollback()
            raise exceptions.BadRequestException("Percentage discounts cannot exceed 100")

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise exceptions.CouponExistsException()

        await self.db.refresh(coupon)
        return coupon


    async def delete_coupon(self, coupon_id: int) -> None:
        coupon = await self.get_coupon(coupon_id)
        await self.db.delete(coupon)
        await self.db.commit()
