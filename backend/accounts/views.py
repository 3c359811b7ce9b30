import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated

from .models import User
from .serializers import UserSerializer, TelegramUpdateSerializer
from realtime.tasks import send_telegram_message_task

logger = logging.getLogger(__name__)

LINK_COMMAND = "/link"


class MeView(APIView):
    """Return the authenticated caller (id and role as the core sees them)."""
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class TelegramWebhookView(APIView):
    """
    Telegram bot webhook.

    A mechanic links their chat by sending ``/link <email>`` to the bot.
    Telegram retries any non-2xx answer, so every outcome answers 200.
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        serializer = TelegramUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.debug("Ignoring telegram update without a chat: %s", serializer.errors)
            return Response({"ok": True})

        chat_id = serializer.validated_data["chat_id"]
        text = serializer.validated_data["text"].strip()

        if not text.startswith(LINK_COMMAND):
            return Response({"ok": True})

        parts = text.split()
        if len(parts) != 2:
            self._reply(chat_id, "Usage: /link your@email.com")
            return Response({"ok": True})

        email = parts[1]
        user = User.objects.filter(email__iexact=email, role=User.MECHANIC).first()
        if user is None:
            self._reply(chat_id, "No mechanic account found for that email.")
            return Response({"ok": True})

        user.telegram_chat_id = chat_id
        user.save(update_fields=["telegram_chat_id"])
        logger.info("Linked telegram chat %s to mechanic %s", chat_id, user.id)
        self._reply(chat_id, "Linked! You will now receive job notifications here.")
        return Response({"ok": True}, status=status.HTTP_200_OK)

    def _reply(self, chat_id, text):
        send_telegram_message_task.delay(chat_id=chat_id, text=text)
