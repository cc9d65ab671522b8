from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_user
from gocinema.core.exceptions import ConflictError
from gocinema.models.user import User
from gocinema.schemas.user import User as UserSchema, UserUpdate

router = APIRouter(prefix="/me", tags=["Me"])

EMAIL_TAKEN = "Այս էլ. հասցեով օգտատեր արդեն գոյություն ունի"


@router.get("/", response_model=UserSchema)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.patch("/", response_model=UserSchema)
def update_me(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update the authenticated user's profile (name, email)."""
    update = data.model_dump(exclude_unset=True)
    if update.get("email") and update["email"] != current_user.email:
        clash = db.query(User).filter(User.email == update["email"], User.id != current_user.id).first()
        if clash:
            raise ConflictError(EMAIL_TAKEN)
        # A changed address has to be confirmed again
        current_user.email_verified = False
    for field, value in update.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user
