from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Optional
from datetime import datetime

from ..enums import UserRole


validated_mobile_num = Annotated[str, StringConstraints(min_length=7, max_length=20, pattern=r'^\+?[0-9 ]{7,20}$')]


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[validated_mobile_num] = None


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: UserRole
