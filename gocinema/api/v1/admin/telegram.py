import logging

from fastapi import APIRouter, Depends, HTTPException, status

from gocinema.api.deps import get_current_admin_user
from gocinema.core.config import settings
from gocinema.models.user import User
from gocinema.services.telegram import TelegramClient, get_telegram_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/telegram", tags=["Admin - Telegram"])


def webhook_url() -> str:
    return f"{settings.APP_URL.rstrip('/')}{settings.API_V1_STR}/telegram/webhook"


@router.post("/setup")
def setup_webhook(
    telegram: TelegramClient = Depends(get_telegram_client),
    current_user: User = Depends(get_current_admin_user),
):
    """Register this deployment's webhook with Telegram. Run once after deploy."""
    if not settings.TELEGRAM_BOT_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="TELEGRAM_BOT_TOKEN is not set",
        )
    url = webhook_url()
    answer = telegram.set_webhook(url)
    if not answer.get("ok"):
        logger.warning("setWebhook rejected: %s", answer)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=answer)
    logger.info("Telegram webhook set to %s", url)
    return {"success": True, "message": f"Webhook set to: {url}", "telegram": answer}
