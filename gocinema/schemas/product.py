from typing import Optional
from pydantic import BaseModel, UUID4
from decimal import Decimal
from datetime import datetime


class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal
    image: Optional[str] = None
    category: str
    is_active: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    image: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class Product(ProductBase):
    id: UUID4
    created_at: datetime

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    id: UUID4
    name: str
    category: str

    class Config:
        from_attributes = True


# DELETE /admin/products/{id}: soft when the product was ordered
class ProductDeleteResponse(BaseModel):
    success: bool = True
    soft_deleted: bool = False
