from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_optional_user
from gocinema.core.exceptions import InvalidInputError, REQUIRED_FIELDS
from gocinema.models.content import Contact, FAQ
from gocinema.models.product import Product
from gocinema.models.user import User
from gocinema.schemas.common import ActionResult
from gocinema.schemas.content import ContactCreate, FAQ as FAQSchema
from gocinema.schemas.product import Product as ProductSchema

products_router = APIRouter(prefix="/products", tags=["Products"])
faq_router = APIRouter(prefix="/faq", tags=["FAQ"])
contacts_router = APIRouter(prefix="/contacts", tags=["Contacts"])

CONTACT_RECEIVED = "Ձեր հաղորդագրությունը հաջողությամբ ուղարկվել է"


@products_router.get("/", response_model=List[ProductSchema])
def list_products(category: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Concessions on sale, grouped by category."""
    query = db.query(Product).filter(Product.is_active == True)
    if category:
        query = query.filter(Product.category == category)
    return query.order_by(Product.category, Product.name).all()


@faq_router.get("/", response_model=List[FAQSchema])
def list_faqs(db: Session = Depends(get_db)):
    return db.query(FAQ).filter(FAQ.is_active == True).order_by(FAQ.order, FAQ.created_at).all()


@contacts_router.post("/", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
def submit_contact(
    data: ContactCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Contact form; signed-in senders are linked to their account."""
    if not data.name.strip() or not data.subject.strip() or not data.message.strip():
        raise InvalidInputError(REQUIRED_FIELDS)
    contact = Contact(
        **data.model_dump(),
        user_id=current_user.id if current_user else None,
        status="new",
    )
    db.add(contact)
    db.commit()
    return ActionResult(message=CONTACT_RECEIVED)
