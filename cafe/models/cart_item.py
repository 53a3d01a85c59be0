from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ..db.base import Base
from ..models.base import TimeStampMixin


class CartItem(Base, TimeStampMixin):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(String, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)  # frozen when first added
    quantity = Column(Integer, default=1, nullable=False)
    position = Column(Integer, default=0, nullable=False)

    # Relationships
    cart = relationship("Cart", back_populates="cart_items")


    def __repr__(self):
        return f'<CartItem(cart_id={self.cart_id}, menu_item_id={self.menu_item_id}, quantity={self.quantity})>'
