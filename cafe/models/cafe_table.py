from sqlalchemy import Column, Enum, Integer

from ..db.base import Base
from ..enums import TableStatus
from ..models.base import TimeStampMixin


class CafeTable(Base, TimeStampMixin):
    __tablename__ = "cafe_tables"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, unique=True, index=True)
    seats = Column(Integer, default=2, nullable=False)
    status = Column(Enum(TableStatus), default=TableStatus.AVAILABLE, nullable=False)
