from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, UUID4
from datetime import datetime

ContactStatus = Literal["new", "read", "replied", "archived"]


# Contact form (POST /contacts)
class ContactCreate(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    subject: str
    message: str


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class Contact(BaseModel):
    id: UUID4
    user_id: Optional[UUID4] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    subject: str
    message: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


# FAQ Schemas
class FAQCreate(BaseModel):
    question: str
    answer: str
    order: Optional[int] = None  # appended after the last entry when omitted
    is_active: bool = True


class FAQUpdate(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class FAQ(BaseModel):
    id: UUID4
    question: str
    answer: str
    order: int
    is_active: bool

    class Config:
        from_attributes = True
