from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.core.config import settings
from gocinema.core.exceptions import ConflictError, InvalidInputError, REQUIRED_FIELDS
from gocinema.core.security import create_access_token, get_password_hash, verify_password
from gocinema.utils.phone import normalize_phone

from gocinema.api.deps import get_current_user
from gocinema.models.user import User
from gocinema.schemas.user import UserCreate, AdminCreate, Token, User as UserSchema

router = APIRouter(prefix="/auth", tags=["auth"])

PHONE_TAKEN = "Այս հեռախոսահամարով օգտատեր արդեն գոյություն ունի"
PASSWORD_TOO_SHORT = "Գաղտնաբառը պետք է լինի առնվազն {min} նիշ"


def _build_token_response(user: User) -> Token:
    access_token = create_access_token(subject=str(user.id), role=user.role)
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=UserSchema.model_validate(user),
    )


def _create_user(body: UserCreate, role: str, db: Session) -> User:
    if not body.name.strip() or not body.phone or not body.password:
        raise InvalidInputError(REQUIRED_FIELDS)
    if len(body.password) < settings.MIN_PASSWORD_LENGTH:
        raise InvalidInputError(PASSWORD_TOO_SHORT.format(min=settings.MIN_PASSWORD_LENGTH))
    phone = normalize_phone(body.phone)
    if db.query(User).filter(User.phone == phone).first():
        raise ConflictError(PHONE_TAKEN)
    user = User(
        name=body.name.strip(),
        phone=phone,
        password_hash=get_password_hash(body.password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    return _build_token_response(_create_user(body, "user", db))


@router.post("/admin/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def admin_register(body: AdminCreate, db: Session = Depends(get_db)):
    if body.admin_secret != settings.ADMIN_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret",
        )
    return _build_token_response(_create_user(body, "admin", db))


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Log in with phone number (sent as `username`) and password."""
    phone = "".join(form_data.username.split())
    user = db.query(User).filter(User.phone == phone).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect phone or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return _build_token_response(user)


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(current_user: User = Depends(get_current_user)):
    """
    Logout the current user.
    Tokens are stateless JWTs, so the client simply discards its token.
    """
    return {"message": "Successfully logged out"}
