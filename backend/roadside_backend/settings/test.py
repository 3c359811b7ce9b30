"""Settings used by the test suite: file-backed SQLite, in-memory channel layer, eager Celery."""

from .settings import *  # noqa: F401,F403

DEBUG = False
SECRET_KEY = "test-secret-key"
ALLOWED_HOSTS = ["*"]

# A file, not :memory:, so the threaded race tests see one shared database.
# PostgreSQL (POSTGRES_DB set) keeps its own test database naming.
if DATABASES['default']['ENGINE'] == 'django.db.backends.sqlite3':  # noqa: F405
    DATABASES['default']['TEST'] = {'NAME': BASE_DIR / 'test_db.sqlite3'}  # noqa: F405

CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    }
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

TELEGRAM_BOT_TOKEN = ""
