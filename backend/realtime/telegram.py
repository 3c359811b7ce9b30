"""
Telegram Bot API client for out-of-band mechanic notifications.

Telegram is a best-effort secondary channel: a missing bot token or chat id
skips the send, and HTTP failures are logged rather than raised.
"""

import logging
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10


class TelegramNotifier:
    def __init__(self, bot_token: Optional[str] = None, api_url: Optional[str] = None):
        self.bot_token = settings.TELEGRAM_BOT_TOKEN if bot_token is None else bot_token
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.bot_token.strip())

    def send_message(self, chat_id, text: str) -> bool:
        if chat_id is None or not self.enabled:
            logger.debug("Telegram send skipped (chat_id=%s, enabled=%s)", chat_id, self.enabled)
            return False

        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        try:
            response = requests.post(url, json={"chat_id": chat_id, "text": text}, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to send Telegram message to chat %s: %s", chat_id, e)
            return False

        logger.info("Telegram message sent to chat %s", chat_id)
        return True
