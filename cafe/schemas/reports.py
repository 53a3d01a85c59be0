from pydantic import BaseModel
from typing import List

from .order import OrderResponse


class SalesReport(BaseModel):
    total_revenue: float
    total_orders: int
    average_order: float
    currency: str
    customers: int
    recent_orders: List[OrderResponse]
