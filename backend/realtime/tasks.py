"""Celery tasks for out-of-band notification delivery."""

import logging

from celery import shared_task
from django.contrib.auth import get_user_model

from .telegram import TelegramNotifier

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def send_telegram_message_task(chat_id: int, text: str):
    """Deliver ``text`` to a Telegram chat."""
    return TelegramNotifier().send_message(chat_id, text)


@shared_task(ignore_result=True)
def notify_mechanic_telegram_task(mechanic_id: int, text: str):
    """Deliver ``text`` to a mechanic's linked Telegram chat, if they linked one."""
    User = get_user_model()
    chat_id = User.objects.filter(id=mechanic_id).values_list("telegram_chat_id", flat=True).first()
    if chat_id is None:
        logger.debug("Mechanic %s has no linked Telegram chat", mechanic_id)
        return False
    return TelegramNotifier().send_message(chat_id, text)


def queue_mechanic_telegram(mechanic_id: int, text: str):
    """NotificationHub alert hook: hand the message to a worker."""
    notify_mechanic_telegram_task.delay(mechanic_id, text)
