from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.core.exceptions import InvalidInputError, NotFoundError, REQUIRED_FIELDS
from gocinema.models.user import User
from gocinema.models.content import Contact, FAQ
from gocinema.models.order import OrderItem
from gocinema.models.product import Product
from gocinema.schemas.common import DeleteResponse
from gocinema.schemas.content import (
    Contact as ContactSchema,
    ContactStatus,
    ContactStatusUpdate,
    FAQ as FAQSchema,
    FAQCreate,
    FAQUpdate,
)
from gocinema.schemas.product import (
    Product as ProductSchema,
    ProductCreate,
    ProductDeleteResponse,
    ProductUpdate,
)

products_router = APIRouter(prefix="/admin/products", tags=["Admin - Products"])
faq_router = APIRouter(prefix="/admin/faq", tags=["Admin - FAQ"])
contacts_router = APIRouter(prefix="/admin/contacts", tags=["Admin - Contacts"])

PRODUCT_NOT_FOUND = "Արտադրանքը չի գտնվել"
FAQ_NOT_FOUND = "Հաճախակի հարցը չի գտնվել"
CONTACT_NOT_FOUND = "Հաղորդագրությունը չի գտնվել"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def _get_product(db: Session, product_id: UUID) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


@products_router.get("/", response_model=List[ProductSchema])
def list_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Every product, inactive ones included."""
    return db.query(Product).order_by(Product.category, Product.name).all()


@products_router.get("/{product_id}", response_model=ProductSchema)
def get_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_product(db, product_id)


@products_router.post("/", response_model=ProductSchema, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    if not data.name.strip() or not data.category.strip() or data.price < 0:
        raise InvalidInputError(REQUIRED_FIELDS)
    product = Product(**data.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@products_router.patch("/{product_id}", response_model=ProductSchema)
def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    product = _get_product(db, product_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


@products_router.delete("/{product_id}", response_model=ProductDeleteResponse)
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Ordered products are only deactivated so past orders keep their lines."""
    product = _get_product(db, product_id)
    ordered = db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
    if ordered:
        product.is_active = False
        db.commit()
        return ProductDeleteResponse(soft_deleted=True)

    db.delete(product)
    db.commit()
    return ProductDeleteResponse()


# ---------------------------------------------------------------------------
# FAQ
# ---------------------------------------------------------------------------


def _get_faq(db: Session, faq_id: UUID) -> FAQ:
    faq = db.query(FAQ).filter(FAQ.id == faq_id).first()
    if not faq:
        raise NotFoundError(FAQ_NOT_FOUND)
    return faq


@faq_router.get("/", response_model=List[FAQSchema])
def list_faqs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return db.query(FAQ).order_by(FAQ.order, FAQ.created_at).all()


@faq_router.get("/{faq_id}", response_model=FAQSchema)
def get_faq(
    faq_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_faq(db, faq_id)


@faq_router.post("/", response_model=FAQSchema, status_code=status.HTTP_201_CREATED)
def create_faq(
    data: FAQCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    if not data.question.strip() or not data.answer.strip():
        raise InvalidInputError(REQUIRED_FIELDS)
    order = data.order
    if order is None:
        order = (db.query(func.max(FAQ.order)).scalar() or 0) + 1
    faq = FAQ(question=data.question, answer=data.answer, order=order, is_active=data.is_active)
    db.add(faq)
    db.commit()
    db.refresh(faq)
    return faq


@faq_router.patch("/{faq_id}", response_model=FAQSchema)
def update_faq(
    faq_id: UUID,
    data: FAQUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    faq = _get_faq(db, faq_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(faq, field, value)
    db.commit()
    db.refresh(faq)
    return faq


@faq_router.delete("/{faq_id}", response_model=DeleteResponse)
def delete_faq(
    faq_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    db.delete(_get_faq(db, faq_id))
    db.commit()
    return DeleteResponse(id=str(faq_id))


# ---------------------------------------------------------------------------
# Contact messages
# ---------------------------------------------------------------------------


def _get_contact(db: Session, contact_id: UUID) -> Contact:
    contact = db.query(Contact).filter(Contact.id == contact_id).first()
    if not contact:
        raise NotFoundError(CONTACT_NOT_FOUND)
    return contact


@contacts_router.get("/", response_model=List[ContactSchema])
def list_contacts(
    status_filter: Optional[ContactStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(Contact)
    if status_filter:
        query = query.filter(Contact.status == status_filter)
    return query.order_by(Contact.created_at.desc()).all()


@contacts_router.get("/{contact_id}", response_model=ContactSchema)
def get_contact(
    contact_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_contact(db, contact_id)


@contacts_router.patch("/{contact_id}", response_model=ContactSchema)
def update_contact_status(
    contact_id: UUID,
    data: ContactStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    contact = _get_contact(db, contact_id)
    contact.status = data.status
    db.commit()
    db.refresh(contact)
    return contact


@contacts_router.delete("/{contact_id}", response_model=DeleteResponse)
def delete_contact(
    contact_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    db.delete(_get_contact(db, contact_id))
    db.commit()
    return DeleteResponse(id=str(contact_id))
