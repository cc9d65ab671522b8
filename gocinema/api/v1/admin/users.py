from uuid import UUID
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.core.config import settings
from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from gocinema.core.security import get_password_hash
from gocinema.models.user import User
from gocinema.models.content import Contact
from gocinema.models.order import Order
from gocinema.models.ticket import Ticket
from gocinema.schemas.common import ActionResult, DeleteResponse, PaginatedResponse
from gocinema.schemas.user import AdminUserUpdate, PasswordChange, User as UserSchema, UserWithCounts
from gocinema.utils.phone import normalize_phone

router = APIRouter(prefix="/admin/users", tags=["Admin - Users"])

USER_NOT_FOUND = "Օգտատերը չի գտնվել"
PHONE_TAKEN = "Այս հեռախոսահամարով օգտատեր արդեն գոյություն ունի"
EMAIL_TAKEN = "Այս էլեկտրոնային հասցեով օգտատեր արդեն գոյություն ունի"
PASSWORD_TOO_SHORT = "Գաղտնաբառը պետք է լինի առնվազն {min} նիշ"
INVALID_ROLE = "Անվավեր դեր"
USER_HAS_BOOKINGS = "Օգտատերը ունի տոմսեր կամ պատվերներ և չի կարող ջնջվել"
PASSWORD_CHANGED = "Գաղտնաբառը փոխված է"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_user(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def _with_counts(db: Session, user: User) -> UserWithCounts:
    out = UserWithCounts.model_validate(user)
    out.tickets_count = db.query(func.count(Ticket.id)).filter(Ticket.user_id == user.id).scalar()
    out.orders_count = db.query(func.count(Order.id)).filter(Order.user_id == user.id).scalar()
    return out


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[UserWithCounts])
def list_users(
    role: Optional[Literal["user", "admin"]] = Query(None),
    search: Optional[str] = Query(None, description="Matches name or phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if search:
        query = query.filter(User.name.ilike(f"%{search}%") | User.phone.contains(search))

    total = query.count()
    users = query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return PaginatedResponse(
        data=[_with_counts(db, u) for u in users],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit),
    )


@router.get("/{user_id}", response_model=UserWithCounts)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _with_counts(db, _get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserSchema)
def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    user = _get_user(db, user_id)
    update = data.model_dump(exclude_unset=True, exclude_none=True)

    if "phone" in update:
        update["phone"] = normalize_phone(update["phone"])
        clash = db.query(User.id).filter(User.phone == update["phone"], User.id != user.id).first()
        if clash:
            raise ConflictError(PHONE_TAKEN)
    if "email" in update:
        clash = db.query(User.id).filter(User.email == update["email"], User.id != user.id).first()
        if clash:
            raise ConflictError(EMAIL_TAKEN)
    if "role" in update and update["role"] not in ("user", "admin"):
        raise InvalidInputError(INVALID_ROLE)

    for field, value in update.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


@router.post("/{user_id}/password", response_model=ActionResult)
def change_password(
    user_id: UUID,
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    user = _get_user(db, user_id)
    if len(data.new_password) < settings.MIN_PASSWORD_LENGTH:
        raise InvalidInputError(PASSWORD_TOO_SHORT.format(min=settings.MIN_PASSWORD_LENGTH))
    user.password_hash = get_password_hash(data.new_password)
    db.commit()
    return ActionResult(message=PASSWORD_CHANGED)


@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete an account without booking history; reset tokens go with it."""
    user = _get_user(db, user_id)
    has_tickets = db.query(Ticket.id).filter(Ticket.user_id == user_id).first()
    has_orders = db.query(Order.id).filter(Order.user_id == user_id).first()
    if has_tickets or has_orders:
        raise ConflictError(USER_HAS_BOOKINGS)

    # Contact messages outlive the account
    db.query(Contact).filter(Contact.user_id == user_id).update(
        {Contact.user_id: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
    return DeleteResponse(id=str(user_id))
