from django.contrib import admin
from django.urls import path, include

from accounts.views import TelegramWebhookView
from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint

    # Token endpoints (at /api/auth/)
    path('api/auth/', include('accounts.urls')),

    # Requester APIs (create, cancel, active, candidates)
    path('api/service-requests/', include('service_requests.urls')),

    # Mechanic APIs (profile, availability, location, request transitions)
    path('api/mechanic/', include('mechanics.urls')),

    # Telegram bot webhook
    path('api/telegram/webhook/', TelegramWebhookView.as_view(), name='telegram-webhook'),
]
