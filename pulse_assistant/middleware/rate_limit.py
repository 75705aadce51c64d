"""
Per-client rate limiting for the assistant endpoints.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from pulse_assistant.config import settings

limiter = Limiter(key_func=get_remote_address)

ASSISTANT_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
