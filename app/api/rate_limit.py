import logging

from prometheus_client import Counter
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)

_PROM_RATE_LIMIT = Counter("dairyops_rate_limit_exceeded_events", "Rate limit exceeded events (handler invocations)")

# Single-process deployment; counters live in memory and are keyed by client IP
limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

RATE_LIMITS = {
    "login": settings.RATE_LIMIT_LOGIN,
    "register": "5/minute" if settings.ENV.lower() == "prod" else "50/minute",
    "mfa_verify": "10/minute",
}


def increment_rate_limit_exceeded():
    _PROM_RATE_LIMIT.inc()
    logger.warning("Rate limit exceeded")
