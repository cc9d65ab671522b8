from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_user
from gocinema.models.order import Order, OrderItem
from gocinema.models.ticket import Ticket
from gocinema.models.user import User
from gocinema.schemas.order import Order as OrderSchema, OrderCreate, OrderProductsUpdate, OrderResult
from gocinema.services import orders as order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


def _result(order: Order) -> OrderResult:
    return OrderResult(order=OrderSchema.model_validate(order_service.refresh_total(order)))


@router.post("/", response_model=OrderResult, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Book seats for a screening together with optional concessions."""
    order = order_service.create_order(db, current_user, data.screening_id, data.seat_ids, data.products)
    return _result(order)


@router.get("/", response_model=List[OrderSchema])
def my_orders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    orders = (
        db.query(Order)
        .options(
            joinedload(Order.tickets).joinedload(Ticket.seat),
            joinedload(Order.order_items).joinedload(OrderItem.product),
        )
        .filter(Order.user_id == current_user.id)
        .order_by(Order.created_at.desc())
        .all()
    )
    return [OrderSchema.model_validate(order_service.refresh_total(o)) for o in orders]


@router.get("/{order_id}", response_model=OrderSchema)
def get_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_service.get_order_for_user(db, order_id, current_user)
    return OrderSchema.model_validate(order_service.refresh_total(order))


@router.put("/{order_id}/products", response_model=OrderResult)
def update_order_products(
    order_id: UUID,
    data: OrderProductsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_service.update_order_products(db, order_id, current_user, data.products)
    return _result(order)


@router.post("/{order_id}/cancel", response_model=OrderResult)
def cancel_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_service.cancel_order(db, order_id, current_user)
    return _result(order)
