from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import exceptions
from ..models import CafeTable
from ..schemas.table import CafeTableCreate, CafeTableUpdate


class TableService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def list_tables(self) -> List[CafeTable]:
        query = select(CafeTable).order_by(CafeTable.table_number)
        return (await self.db.execute(query)).scalars().all()


    async def get_table(self, table_id: int) -> CafeTable:
        table = await self.db.get(CafeTable, table_id)
        if not table:
            raise exceptions.NotFoundException(f"Table with ID {table_id} not found")
        return table


    async def create_table(self, data: CafeTableCreate) -> CafeTable:
        existing = await self.db.execute(select(CafeTable).filter_by(table_number=data.table_number))
        if existing.scalars().first():
            raise exceptions.TableExistsException()

        table = CafeTable(**data.model_dump())
        self.db.add(table)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise exceptions.TableExistsException()

        await self.db.refresh(table)
        return table


    async def update_table(self, table_id: int, data: CafeTableUpdate) -> CafeTable:
        table = await self.get_table(table_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(table, field, value)

        await self.db.commit()
        await self.db.refresh(table)
        return table


    async def delete_table(self, table_id: int) -> None:
        table = await self.get_table(table_id)
        await self.db.delete(table)
        await self.db.commit()
