from sqlalchemy import Column, Enum, String
from sqlalchemy.orm import relationship

from ..models.base import TimeStampMixin, Base
from ..enums import UserRole


class User(Base, TimeStampMixin):
    """
    Profile of an account holder. ``id`` is the subject claim of the token
    issued by the auth provider.
    """
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    email = Column(String, index=True, nullable=True)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.CUSTOMER, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="customer")


    def __repr__(self):
        return f'<User(id={self.id}, email={self.email}, role={self.role})>'
