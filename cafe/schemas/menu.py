from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class MenuCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    description: Optional[str] = None
    sort_order: Optional[int] = None


class MenuCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    description: Optional[str] = None
    sort_order: Optional[int] = None


class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category_id: int
    is_available: bool = True
    image_url: Optional[str] = None
    sort_order: int = 0


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    is_available: Optional[bool] = None
    image_url: Optional[str] = None
    sort_order: Optional[int] = None


class MenuItemResponse(MenuItemBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class MenuCategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    sort_order: int

    class Config:
        from_attributes = True


class MenuSectionResponse(MenuCategoryResponse):
    """A category with its available items, as shown on the public menu"""
    items: List[MenuItemResponse] = []
