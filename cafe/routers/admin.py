from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ..core.dependencies import RoleChecker, get_current_admin, get_db, get_order_events
from ..enums import UserRole
from ..models import User
from ..schemas.contact import ContactMessageResponse
from ..schemas.coupon import CouponCreate, CouponResponse, CouponUpdate
from ..schemas.menu import (
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from ..schemas.order import OrderDetail, PaymentStatusUpdate
from ..schemas.reports import SalesReport
from ..schemas.table import CafeTableCreate, CafeTableResponse, CafeTableUpdate
from ..schemas.user_schema import RoleUpdate, UserResponse
from ..services.contact_service import ContactService
from ..services.coupon_service import CouponService
from ..services.menu_service import MenuService
from ..services.order_events import OrderEventBus
from ..services.order_service import OrderService
from ..services.report_service import ReportService
from ..services.staff_service import StaffService
from ..services.table_service import TableService


router = APIRouter()
admins_only = Depends(RoleChecker([UserRole.ADMIN]))
managers_only = Depends(RoleChecker([UserRole.STAFF, UserRole.ADMIN]))


async def get_order_service(
    db: AsyncSession = Depends(get_db),
    events: OrderEventBus = Depends(get_order_events),
) -> OrderService:
    return OrderService(db, events)


# Orders

@router.get('/orders', dependencies=[managers_only], response_model=List[OrderDetail])
async def list_orders(
    scope: str = Query("active", pattern="^(active|all)$", description="`active` or `all`"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    service: OrderService = Depends(get_order_service),
):
    """
    **Order Manager**

    `active` lists pending, cooking and ready orders oldest first, the way
    they are worked. `all` lists every order newest first.
    """
    if scope == "active":
        return await service.list_active()
    return await service.list_orders(skip=skip, limit=limit)


@router.put('/orders/{order_id}/payment', dependencies=[managers_only], response_model=OrderDetail)
async def update_payment_status(
    data: PaymentStatusUpdate,
    order_id: int = Path(..., description="ID of the order"),
    service: OrderService = Depends(get_order_service),
):
    """Mark a cash order paid or unpaid"""
    return await service.update_payment_status(order_id, data.payment_status)


# Coupons

@router.get('/coupons', dependencies=[admins_only], response_model=List[CouponResponse])
async def list_coupons(db: AsyncSession = Depends(get_db)):
    return await CouponService(db).list_coupons()


@router.post('/coupons', dependencies=[admins_only], response_model=CouponResponse, status_code=status.HTTP_201_CREATED)
async def create_coupon(data: CouponCreate, db: AsyncSession = Depends(get_db)):
    """Codes are stored upper-cased and matched case-insensitively"""
    return await CouponService(db).create_coupon(data)


@router.put('/coupons/{coupon_id}', dependencies=[admins_only], response_model=CouponResponse)
async def update_coupon(
    data: CouponUpdate,
    coupon_id: int = Path(..., description="ID of the coupon"),
    db: AsyncSession = Depends(get_db),
):
    return await CouponService(db).update_coupon(coupon_id, data)


@router.delete('/coupons/{coupon_id}', dependencies=[admins_only], status_code=status.HTTP_204_NO_CONTENT)
async def delete_coupon(
    coupon_id: int = Path(..., description="ID of the coupon"),
    db: AsyncSession = Depends(get_db),
):
    await CouponService(db).delete_coupon(coupon_id)


# Menu

@router.get('/menu/categories', dependencies=[admins_only], response_model=List[MenuCategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await MenuService(db).list_categories()


@router.post('/menu/categories', dependencies=[admins_only], response_model=MenuCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: MenuCategoryCreate, db: AsyncSession = Depends(get_db)):
    """New categories go to the end of the menu unless `sort_order` is given"""
    return await MenuService(db).create_category(data)


@router.put('/menu/categories/{category_id}', dependencies=[admins_only], response_model=MenuCategoryResponse)
async def update_category(
    data: MenuCategoryUpdate,
    category_id: int = Path(..., description="ID of the category"),
    db: AsyncSession = Depends(get_db),
):
    return await MenuService(db).update_category(category_id, data)


@router.delete('/menu/categories/{category_id}', dependencies=[admins_only], status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int = Path(..., description="ID of the category"),
    db: AsyncSession = Depends(get_db),
):
    """Deletes the category and every item in it"""
    await MenuService(db).delete_category(category_id)


@router.get('/menu/items', dependencies=[admins_only], response_model=List[MenuItemResponse])
async def list_items(db: AsyncSession = Depends(get_db)):
    """All items, including unavailable ones"""
    return await MenuService(db).list_items()


@router.post('/menu/items', dependencies=[admins_only], response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(data: MenuItemCreate, db: AsyncSession = Depends(get_db)):
    return await MenuService(db).create_item(data)


@router.put('/menu/items/{item_id}', dependencies=[admins_only], response_model=MenuItemResponse)
async def update_item(
    data: MenuItemUpdate,
    item_id: int = Path(..., description="ID of the menu item"),
    db: AsyncSession = Depends(get_db),
):
    """Price changes do not touch items already sitting in carts"""
    return await MenuService(db).update_item(item_id, data)


@router.delete('/menu/items/{item_id}', dependencies=[admins_only], status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int = Path(..., description="ID of the menu item"),
    db: AsyncSession = Depends(get_db),
):
    await MenuService(db).delete_item(item_id)


# Tables

@router.get('/tables', dependencies=[managers_only], response_model=List[CafeTableResponse])
async def list_tables(db: AsyncSession = Depends(get_db)):
    return await TableService(db).list_tables()


@router.post('/tables', dependencies=[admins_only], response_model=CafeTableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(data: CafeTableCreate, db: AsyncSession = Depends(get_db)):
    return await TableService(db).create_table(data)


@router.put('/tables/{table_id}', dependencies=[managers_only], response_model=CafeTableResponse)
async def update_table(
    data: CafeTableUpdate,
    table_id: int = Path(..., description="ID of the table"),
    db: AsyncSession = Depends(get_db),
):
    """Change seats or status (available, occupied, reserved)"""
    return await TableService(db).update_table(table_id, data)


@router.delete('/tables/{table_id}', dependencies=[admins_only], status_code=status.HTTP_204_NO_CONTENT)
async def delete_table(
    table_id: int = Path(..., description="ID of the table"),
    db: AsyncSession = Depends(get_db),
):
    await TableService(db).delete_table(table_id)


# Staff

@router.get('/users', dependencies=[admins_only], response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None, description="Only profiles with this role"),
    db: AsyncSession = Depends(get_db),
):
    return await StaffService(db).list_profiles(role)


@router.put('/users/{user_id}/role', dependencies=[admins_only], response_model=UserResponse)
async def update_user_role(
    data: RoleUpdate,
    user_id: str = Path(..., description="ID of the profile"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Give a profile the customer, kitchen, staff or admin role"""
    return await StaffService(db).update_role(user_id, data.role, current_user)


# Contact inbox

@router.get('/messages', dependencies=[admins_only], response_model=List[ContactMessageResponse])
async def list_messages(db: AsyncSession = Depends(get_db)):
    return await ContactService(db).list_messages()


@router.patch('/messages/{message_id}/read', dependencies=[admins_only], response_model=ContactMessageResponse)
async def toggle_message_read(
    message_id: int = Path(..., description="ID of the message"),
    db: AsyncSession = Depends(get_db),
):
    """Flip the read flag of a message"""
    return await ContactService(db).toggle_read(message_id)


@router.delete('/messages/{message_id}', dependencies=[admins_only], status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: int = Path(..., description="ID of the message"),
    db: AsyncSession = Depends(get_db),
):
    await ContactService(db).delete_message(message_id)


# Reports

@router.get('/reports/sales', dependencies=[admins_only], response_model=SalesReport)
async def sales_report(db: AsyncSession = Depends(get_db)):
    """
    **Sales Summary**

    Revenue, order count and average order value exclude cancelled orders.
    Also returns the number of customer profiles and the ten latest orders.
    """
    return await ReportService(db).sales_summary()
