from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from ..db.base import Base
from ..models.base import TimeStampMixin


class MenuCategory(Base, TimeStampMixin):
    __tablename__ = "menu_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Relationships
    items = relationship("MenuItem", back_populates="category", cascade="all, delete-orphan")
