from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from ..core.dependencies import get_db, get_optional_user
from ..models import User
from ..schemas.cart import CartItemAdd, CartItemQuantityUpdate, CartResponse, CouponApply
from ..services.cart_service import CartService


router = APIRouter()


async def get_cart_service(db: AsyncSession = Depends(get_db)) -> CartService:
    return CartService(db)


@router.post("/", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def create_cart(
    service: CartService = Depends(get_cart_service),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    **Open a Cart**

    Creates an empty cart session. Keep the returned `id` and send it with
    every cart call and at checkout. Works for guests and signed-in users.
    """
    cart = await service.create_cart(current_user)
    return await service.get_summary(cart.id)


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(
    cart_id: str = Path(..., description="ID of the cart session"),
    service: CartService = Depends(get_cart_service),
):
    """Get the cart with its lines and totals"""
    return await service.get_summary(cart_id)


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_item(
    item: CartItemAdd,
    cart_id: str = Path(..., description="ID of the cart session"),
    service: CartService = Depends(get_cart_service),
):
    """
    **Add Item**

    Adds one unit of a menu item. Adding an item already in the cart bumps
    its quantity. The unit price is fixed at the moment of the first add.
    """
    return await service.add_item(cart_id, item.menu_item_id)


@router.put("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def update_item_quantity(
    data: CartItemQuantityUpdate,
    cart_id: str = Path(..., description="ID of the cart session"),
    item_id: str = Path(..., description="Menu item ID of the cart line"),
    service: CartService = Depends(get_cart_service),
):
    """Set the quantity of a line. A quantity of zero or less removes it."""
    return await service.update_quantity(cart_id, item_id, data.quantity)


@router.delete("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def remove_item(
    cart_id: str = Path(..., description="ID of the cart session"),
    item_id: str = Path(..., description="Menu item ID of the cart line"),
    service: CartService = Depends(get_cart_service),
):
    """Remove a line from the cart"""
    return await service.remove_item(cart_id, item_id)


@router.post("/{cart_id}/coupon", response_model=CartResponse)
async def apply_coupon(
    data: CouponApply,
    cart_id: str = Path(..., description="ID of the cart session"),
    service: CartService = Depends(get_cart_service),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    **Apply Coupon**

    Replaces any coupon already on the cart. The discount is worked out now,
    from the current subtotal, and is not recalculated when items change
    afterwards. Coupons limited per customer need a signed-in user.
    """
    return await service.apply_coupon(cart_id, data.code, current_user)


@router.delete("/{cart_id}/coupon", response_model=CartResponse)
async def remove_coupon(
    cart_id: str = Path(..., description="ID of the cart session"),
    service: CartService = Depends(get_cart_service),
):
    """Remove the coupon from the cart"""
    return await service.remove_coupon(cart_id)


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(
    cart_id: str = Path(..., description="ID of the cart session"),
    service: CartService = Depends(get_cart_service),
):
    """Empty the cart and drop its coupon"""
    return await service.clear(cart_id)
