from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "phone_number",
        ]
        read_only_fields = fields


class TelegramUpdateSerializer(serializers.Serializer):
    """Just the slice of a Telegram ``Update`` the link command needs."""
    chat_id = serializers.IntegerField()
    text = serializers.CharField(allow_blank=True)

    def to_internal_value(self, data):
        message = data.get("message") or {}
        chat = message.get("chat") or {}
        return super().to_internal_value({
            "chat_id": chat.get("id"),
            "text": message.get("text", ""),
        })
