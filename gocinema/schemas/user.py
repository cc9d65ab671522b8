
from typing import Optional
from pydantic import BaseModel, EmailStr, UUID4
from datetime import datetime


# Properties to receive via API on creation (POST /auth/register)
class UserCreate(BaseModel):
    name: str
    phone: str
    password: str


# Properties to receive via API on admin creation (POST /auth/admin/register)
class AdminCreate(UserCreate):
    admin_secret: str


# Properties to receive via API on self-update (PATCH /me)
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None


# Admin-side update (PATCH /admin/users/{id})
class AdminUserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    phone_verified: Optional[bool] = None
    email_verified: Optional[bool] = None


class PasswordChange(BaseModel):
    new_password: str


class User(BaseModel):
    id: UUID4
    name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    role: str
    phone_verified: bool
    email_verified: bool
    telegram_linked: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin list item with activity counters
class UserWithCounts(User):
    tickets_count: int = 0
    orders_count: int = 0


# Compact user for nested responses (admin ticket/order views)
class UserSummary(BaseModel):
    id: UUID4
    name: Optional[str] = None
    phone: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User
