from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..db.base import Base
from ..models.base import TimeStampMixin


class MenuItem(Base, TimeStampMixin):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("menu_categories.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    image_url = Column(String, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Relationships
    category = relationship("MenuCategory", back_populates="items")


    def __repr__(self):
        return f'<MenuItem(id={self.id}, name={self.name}, price={self.price})>'
