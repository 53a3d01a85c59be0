from pydantic import BaseModel, Field
from typing import Optional

from ..enums import TableStatus


class CafeTableCreate(BaseModel):
    table_number: int = Field(..., gt=0)
    seats: int = Field(2, gt=0, le=50)


class CafeTableUpdate(BaseModel):
    seats: Optional[int] = Field(None, gt=0, le=50)
    status: Optional[TableStatus] = None


class CafeTableResponse(BaseModel):
    id: int
    table_number: int
    seats: int
    status: TableStatus

    class Config:
        from_attributes = True
