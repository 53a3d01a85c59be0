from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import get_db
from ..schemas.contact import ContactMessageCreate, ContactMessageResponse
from ..services.contact_service import ContactService


router = APIRouter()


@router.post("/", response_model=ContactMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(data: ContactMessageCreate, db: AsyncSession = Depends(get_db)):
    """Leave a message for the café. No account needed."""
    return await ContactService(db).submit(data)
