from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Config
from ..enums import OrderStatus, UserRole
from ..models import Order, User


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def sales_summary(self, recent: int = 10) -> dict:
        """
        Revenue and order counts. Cancelled orders count towards neither.
        """
        totals = await self.db.execute(
            select(func.count(Order.id), func.coalesce(func.sum(Order.grand_total), 0))
            .where(Order.status != OrderStatus.CANCELLED)
        )
        total_orders, total_revenue = totals.one()
        total_revenue = Decimal(str(total_revenue or 0))

        customers = (await self.db.execute(
            select(func.count(User.id)).where(User.role == UserRole.CUSTOMER)
        )).scalar()

        recent_orders = (await self.db.execute(
            select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(recent)
        )).scalars().all()

        return {
            "total_revenue": total_revenue,
            "total_orders": total_orders,
            "average_order": total_revenue / total_orders if total_orders else Decimal(0),
            "currency": Config.CURRENCY,
            "customers": customers or 0,
            "recent_orders": recent_orders,
        }
