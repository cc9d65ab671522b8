import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.schemas.telegram import TelegramUpdate, WebhookAck
from gocinema.services.telegram import TelegramClient, get_telegram_client
from gocinema.services.telegram_bot import handle_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telegram", tags=["Telegram"])


@router.post("/webhook", response_model=WebhookAck)
def telegram_webhook(
    update: TelegramUpdate,
    db: Session = Depends(get_db),
    telegram: TelegramClient = Depends(get_telegram_client),
):
    """Bot API webhook. Telegram retries anything but a 200, so the answer is always ok."""
    try:
        handle_update(db, update, telegram)
    except Exception:
        db.rollback()
        logger.exception("Telegram update %s failed", update.update_id)
    return WebhookAck()
