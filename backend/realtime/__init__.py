"""
Realtime app: event fanout to WebSocket clients.

Key Components:
    - notifications.py: NotificationHub and topic naming
    - push.py: channel-layer push channel
    - consumers/: WebSocket consumers (mechanic, requester, request observers)
    - middleware.py: JWT/session authentication for WebSocket connections
    - telegram.py, tasks.py: Telegram delivery for mechanics via Celery
"""
