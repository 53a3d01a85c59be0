from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import exceptions
from ..models import ContactMessage
from ..schemas.contact import ContactMessageCreate


class ContactService:
    def __init__(self, db: AsyncSession):
        self.db = db


    async def submit(self, data: ContactMessageCreate) -> ContactMessage:
        message = ContactMessage(**data.model_dump())
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)
        return message


    async def list_messages(self) -> List[ContactMessage]:
        query = select(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        return (await self.db.execute(query)).scalars().all()


    async def get_message(self, message_id: int) -> ContactMessage:
        message = await self.db.get(ContactMessage, message_id)
        if not message:
            raise exceptions.NotFoundException(f"Message with ID {message_id} not found")
        return message


    async def toggle_read(self, message_id: int) -> ContactMessage:
        message = await self.get_message(message_id)
        message.is_read = not message.is_read
        await self.db.commit()
        await self.db.refresh(message)
        return message


    async def delete_message(self, message_id: int) -> None:
        message = await self.get_message(message_id)
        await self.db.delete(message)
        await self.db.commit()
