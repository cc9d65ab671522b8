from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import datetime

from gocinema.models.order import OrderStatus
from gocinema.schemas.product import ProductSummary
from gocinema.schemas.ticket import Ticket


# One concession line; seat_id attaches it to that seat's ticket
class OrderProductLine(BaseModel):
    product_id: UUID4
    quantity: Annotated[int, Field(ge=1)] = 1
    seat_id: Optional[UUID4] = None


# Order: Create (POST /orders)
class OrderCreate(BaseModel):
    screening_id: UUID4
    seat_ids: Annotated[List[UUID4], Field(min_length=1)]
    products: List[OrderProductLine] = []


# PUT /orders/{id}/products
class OrderProductsUpdate(BaseModel):
    products: List[OrderProductLine] = []


class OrderItem(BaseModel):
    id: UUID4
    product_id: UUID4
    ticket_id: Optional[UUID4] = None
    quantity: int
    price: Decimal
    product: Optional[ProductSummary] = None

    class Config:
        from_attributes = True


class Order(BaseModel):
    id: UUID4
    user_id: UUID4
    status: OrderStatus
    total_amount: Decimal
    created_at: Optional[datetime] = None
    tickets: List[Ticket] = []
    order_items: List[OrderItem] = []

    class Config:
        from_attributes = True


class OrderResult(BaseModel):
    success: bool = True
    order: Order
