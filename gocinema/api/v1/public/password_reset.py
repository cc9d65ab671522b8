from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.schemas.password_reset import (
    ForgotPasswordRequest,
    ForgotPasswordResult,
    ResetPasswordRequest,
    ResetPasswordResult,
    TelegramLinkStatus,
    VerifyOtpRequest,
    VerifyOtpResult,
)
from gocinema.services import password_reset as reset_service
from gocinema.services.telegram import TelegramClient, get_telegram_client

router = APIRouter(prefix="/auth/password", tags=["auth"])


@router.post("/forgot", response_model=ForgotPasswordResult)
def forgot_password(
    body: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    telegram: TelegramClient = Depends(get_telegram_client),
):
    """Send a one-time code to the Telegram chat linked to this phone."""
    return reset_service.request_password_reset(db, body.phone, telegram)


@router.get("/telegram-linked", response_model=TelegramLinkStatus)
def telegram_linked(phone: str = Query(...), db: Session = Depends(get_db)):
    """Polled by the client while the user opens the bot and shares their phone."""
    return reset_service.check_telegram_linked(db, phone)


@router.post("/verify", response_model=VerifyOtpResult)
def verify_otp(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    return reset_service.verify_reset_otp(db, body.phone, body.otp)


@router.post("/reset", response_model=ResetPasswordResult)
def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    return reset_service.reset_password(db, body.reset_token, body.new_password)
