from sqlalchemy import Boolean, Column, Integer, String, Text

from ..db.base import Base
from ..models.base import TimeStampMixin


class ContactMessage(Base, TimeStampMixin):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    subject = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
