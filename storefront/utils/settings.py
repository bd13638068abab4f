# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 10))

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER")

# pricing
SHIPPING_FLAT_FEE = Decimal(os.getenv("SHIPPING_FLAT_FEE", "9.99"))
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))

# order numbers, np. ORD-7K2QX
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "ORD-")
ORDER_NUMBER_LENGTH = int(os.getenv("ORDER_NUMBER_LENGTH", 5))
ORDER_NUMBER_MAX_ATTEMPTS = int(os.getenv("ORDER_NUMBER_MAX_ATTEMPTS", 5))

# chat widget
CHAT_STORE_BACKEND = os.getenv("CHAT_STORE_BACKEND", "redis")
CHAT_SESSION_TTL_SECONDS = int(os.getenv("CHAT_SESSION_TTL_SECONDS", 24 * 60 * 60))

SEED_ON_STARTUP = _flag("SEED_ON_STARTUP", "1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
