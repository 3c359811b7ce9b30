from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """Extended user model with role selection"""
    REQUESTER = 'user'
    MECHANIC = 'mechanic'
    ADMIN = 'admin'

    ROLE_CHOICES = [
        (REQUESTER, 'Requester'),
        (MECHANIC, 'Mechanic'),
        (ADMIN, 'Admin'),
    ]

    # Role & basic info
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=REQUESTER)
    phone_number = models.CharField(max_length=20, blank=True)

    # Set by the Telegram webhook when a mechanic links a chat
    telegram_chat_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_mechanic(self):
        return self.role == self.MECHANIC

    @property
    def is_requester(self):
        return self.role == self.REQUESTER
