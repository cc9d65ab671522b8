"""Password recovery through one-time codes delivered by the Telegram bot.

Flow: request (code sent to the linked chat) -> verify (code swapped for a
short-lived reset session token) -> reset (new password stored).
"""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from gocinema.core.config import settings
from gocinema.core.exceptions import (
    DeliveryFailedError,
    InvalidInputError,
    NotFoundError,
    RateLimitedError,
)
from gocinema.core.security import get_password_hash
from gocinema.models.password_reset import PasswordResetToken
from gocinema.models.user import User
from gocinema.schemas.password_reset import (
    ForgotPasswordResult,
    ResetPasswordResult,
    TelegramLinkStatus,
    VerifyOtpResult,
)
from gocinema.services.telegram import TelegramClient
from gocinema.utils.dates import utcnow
from gocinema.utils.phone import normalize_phone

logger = logging.getLogger(__name__)

PURPOSE_OTP = "otp"
PURPOSE_RESET_SESSION = "reset_session"

TOO_MANY_ATTEMPTS = "Չափազանց շատ փորձ: Խնդրում ենք 1 ժամ հետո կրկին փորձել:"
SEND_FAILED = "Telegram-ի միջոցով կոդ ուղարկելը ձախողվեց: Փորձեք կրկին:"
USER_NOT_FOUND = "Օգտատերը չի գտնվել"
BAD_CODE = "Սխալ կամ ժամկետանց կոդ"
PASSWORD_TOO_SHORT = "Գաղտնաբառը պետք է լինի առնվազն {min} նիշ"
SESSION_EXPIRED = "Վերականգնման նիստը ժամկետանց է"


def generate_otp() -> str:
    """Six random digits, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))


def generate_reset_token() -> str:
    return generate_otp() + generate_otp()


def otp_message(otp: str) -> str:
    return (
        "🔐 <b>GoCinema</b>: Գաղտնաբառի վերականգնում\n\n"
        "Ձեր վերականգնման կոդն է:\n\n"
        f"<code>{otp}</code>\n\n"
        f"⏰ Կոդը վավեր է <b>{settings.OTP_EXPIRY_MINUTES} րոպե</b>:\n"
        "⚠️ Մի կիսվեք այս կոդով ոչ ոքի հետ:"
    )


def _live_tokens(db: Session, user_id, purpose: str):
    return db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user_id,
        PasswordResetToken.purpose == purpose,
        PasswordResetToken.used == False,
        PasswordResetToken.expires_at >= utcnow(),
    )


def request_password_reset(db: Session, phone: str, sender: TelegramClient) -> ForgotPasswordResult:
    phone = normalize_phone(phone)
    user = db.query(User).filter(User.phone == phone).first()
    if not user:
        # Same answer as an unlinked account, so phone numbers can't be probed
        return ForgotPasswordResult(has_telegram=False)

    window_start = utcnow() - timedelta(hours=1)
    recent = (
        db.query(PasswordResetToken)
        .filter(
            PasswordResetToken.user_id == user.id,
            PasswordResetToken.purpose == PURPOSE_OTP,
            PasswordResetToken.created_at >= window_start,
        )
        .count()
    )
    if recent >= settings.OTP_MAX_REQUESTS_PER_HOUR:
        logger.warning("OTP rate limit hit for user %s", user.id)
        raise RateLimitedError(TOO_MANY_ATTEMPTS)

    if not user.telegram_chat_id:
        return ForgotPasswordResult(
            has_telegram=False,
            telegram_bot_username=settings.TELEGRAM_BOT_USERNAME,
        )

    # Only the newest code is valid
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user.id,
        PasswordResetToken.used == False,
    ).update({PasswordResetToken.used: True}, synchronize_session=False)

    otp = generate_otp()
    db.add(PasswordResetToken(
        user_id=user.id,
        token=otp,
        purpose=PURPOSE_OTP,
        expires_at=utcnow() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES),
    ))
    db.commit()
    logger.info("Password reset code issued for user %s", user.id)

    if not sender.send_message(user.telegram_chat_id, otp_message(otp)):
        raise DeliveryFailedError(SEND_FAILED)
    return ForgotPasswordResult(has_telegram=True)


def check_telegram_linked(db: Session, phone: str) -> TelegramLinkStatus:
    user = db.query(User).filter(User.phone == normalize_phone(phone)).first()
    return TelegramLinkStatus(linked=bool(user and user.telegram_chat_id))


def verify_reset_otp(db: Session, phone: str, otp: str) -> VerifyOtpResult:
    user = db.query(User).filter(User.phone == normalize_phone(phone)).first()
    if not user:
        raise NotFoundError(USER_NOT_FOUND)

    token = (
        _live_tokens(db, user.id, PURPOSE_OTP)
        .filter(PasswordResetToken.token == (otp or "").strip())
        .order_by(PasswordResetToken.created_at.desc())
        .first()
    )
    if not token:
        raise InvalidInputError(BAD_CODE)

    token.used = True
    session_token = generate_reset_token()
    db.add(PasswordResetToken(
        user_id=user.id,
        token=session_token,
        purpose=PURPOSE_RESET_SESSION,
        expires_at=utcnow() + timedelta(minutes=settings.RESET_SESSION_EXPIRY_MINUTES),
    ))
    db.commit()
    return VerifyOtpResult(reset_token=session_token)


def reset_password(db: Session, reset_token: str, new_password: str) -> ResetPasswordResult:
    if not new_password or len(new_password) < settings.MIN_PASSWORD_LENGTH:
        raise InvalidInputError(PASSWORD_TOO_SHORT.format(min=settings.MIN_PASSWORD_LENGTH))

    token = (
        db.query(PasswordResetToken)
        .filter(
            PasswordResetToken.token == (reset_token or "").strip(),
            PasswordResetToken.purpose == PURPOSE_RESET_SESSION,
            PasswordResetToken.used == False,
            PasswordResetToken.expires_at >= utcnow(),
        )
        .first()
    )
    if not token:
        raise InvalidInputError(SESSION_EXPIRED)

    token.user.password_hash = get_password_hash(new_password)
    token.used = True
    db.commit()
    logger.info("Password reset completed for user %s", token.user_id)
    return ResetPasswordResult()
