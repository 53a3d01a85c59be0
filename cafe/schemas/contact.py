from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from .order import strip_markup


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("subject")
    @classmethod
    def clean_subject(cls, v: Optional[str]) -> Optional[str]:
        return strip_markup(v)

    @field_validator("name", "message")
    @classmethod
    def clean_required_text(cls, v: str) -> str:
        cleaned = strip_markup(v)
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned


class ContactMessageResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
