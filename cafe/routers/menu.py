from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ..core.dependencies import get_db
from ..schemas.coupon import OfferResponse
from ..schemas.menu import MenuSectionResponse
from ..services.coupon_service import CouponService
from ..services.menu_service import MenuService


router = APIRouter()


@router.get("/menu", response_model=List[MenuSectionResponse])
async def get_menu(db: AsyncSession = Depends(get_db)):
    """Menu categories in display order with their available items"""
    return await MenuService(db).get_public_menu()


@router.get("/offers", response_model=List[OfferResponse])
async def get_offers(db: AsyncSession = Depends(get_db)):
    """Coupons that are active and not expired"""
    return await CouponService(db).list_offers()
