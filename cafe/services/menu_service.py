from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .. import exceptions
from ..models import MenuCategory, MenuItem
from ..schemas.menu import MenuCategoryCreate, MenuCategoryUpdate, MenuItemCreate, MenuItemUpdate


class MenuService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def get_public_menu(self) -> List[dict]:
        """Categories in display order, each with its available items"""
        query = (
            select(MenuCategory)
            .options(selectinload(MenuCategory.items))
            .order_by(MenuCategory.sort_order, MenuCategory.id)
        )
        categories = (await self.db.execute(query)).scalars().all()

        sections = []
        for category in categories:
            items = sorted(
                (item for item in category.items if item.is_available),
                key=lambda item: (item.sort_order, item.id),
            )
            sections.append({
                "id": category.id,
                "name": category.name,
                "description": category.description,
                "sort_order": category.sort_order,
                "items": items,
            })

        return sections


    async def list_categories(self) -> List[MenuCategory]:
        query = select(MenuCategory).order_by(MenuCategory.sort_order, MenuCategory.id)
        return (await self.db.execute(query)).scalars().all()


    async def get_category(self, category_id: int) -> MenuCategory:
        category = await self.db.get(MenuCategory, category_id)
        if not category:
            raise exceptions.NotFoundException(f"Category with ID {category_id} not found")
        return category


    async def create_category(self, data: MenuCategoryCreate) -> MenuCategory:
        values = data.model_dump()
        if values["sort_order"] is None:
            count = (await self.db.execute(select(func.count()).select_from(MenuCategory))).scalar()
            values["sort_order"] = count + 1

        category = MenuCategory(**values)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category


    async def update_category(self, category_id: int, data: MenuCategoryUpdate) -> MenuCategory:
        category = await self.get_category(category_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(category, field, value)

        await self.db.commit()
        await self.db.refresh(category)
        return category


    async def delete_category(self, category_id: int) -> None:
        """Delete a category together with its items"""
        category = await self.get_category(category_id)
        # items go with it through the relationship cascade
        await self.db.delete(category)
        await self.db.commit()


    async def list_items(self) -> List[MenuItem]:
        query = select(MenuItem).order_by(MenuItem.sort_order, MenuItem.id)
        return (await self.db.execute(query)).scalars().all()


    async def get_item(self, item_id: int) -> MenuItem:
        item = await self.db.get(MenuItem, item_id)
        if not item:
            raise exceptions.NotFoundException(f"Menu item with ID {item_id} not found")
        return item


    async def create_item(self, data: MenuItemCreate) -> MenuItem:
        await self.get_category(data.category_id)

        item = MenuItem(**data.model_dump())
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item


    async def update_item(self, item_id: int, data: MenuItemUpdate) -> MenuItem:
        item = await self.get_item(item_id)
        values = data.model_dump(exclude_unset=True)

        if values.get("category_id") is not None:
            await self.get_category(values["category_id"])

        for field, value in values.items():
            setattr(item, field, value)

        await self.db.commit()
        await self.db.refresh(item)
        return item


    async def delete_item(self, item_id: int) -> None:
        item = await self.get_item(item_id)
        await self.db.delete(item)
        await self.db.commit()
