"""Thin Telegram Bot API client used for OTP delivery and the phone-linking bot."""

import logging
from typing import Optional

import requests

from gocinema.core.config import settings

logger = logging.getLogger(__name__)


class TelegramClient:
    def __init__(self, token: str, api_url: str = "https://api.telegram.org", timeout: float = 10.0):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.token}/{method}"

    def send_message(self, chat_id, text: str) -> bool:
        """Send an HTML-formatted message. One attempt, True only when Telegram says ok."""
        if not self.token:
            logger.error("TELEGRAM_BOT_TOKEN is not set; message to chat %s dropped", chat_id)
            return False
        try:
            response = requests.post(
                self._url("sendMessage"),
                json={"chat_id": chat_id, "text": text, "parse_mode": "HTML"},
                timeout=self.timeout,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Telegram sendMessage to chat %s failed: %s", chat_id, e)
            return False
        if data.get("ok") is not True:
            logger.warning("Telegram rejected sendMessage to chat %s: %s", chat_id, data.get("description"))
            return False
        return True

    def set_webhook(self, url: str) -> dict:
        """Register the webhook URL. Returns Telegram's JSON answer."""
        response = requests.post(self._url("setWebhook"), json={"url": url}, timeout=self.timeout)
        return response.json()


_client: Optional[TelegramClient] = None


def get_telegram_client() -> TelegramClient:
    """FastAPI dependency; tests override it with a recording fake."""
    global _client
    if _client is None:
        _client = TelegramClient(
            settings.TELEGRAM_BOT_TOKEN,
            api_url=settings.TELEGRAM_API_URL,
            timeout=settings.TELEGRAM_TIMEOUT_SECONDS,
        )
    return _client
