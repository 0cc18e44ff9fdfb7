"""
Rate Limiting Configuration

This module sets up the slowapi Limiter shared by the route modules.
Counters live in RATE_LIMIT_STORAGE_URI: in memory by default, or in Redis
(redis://...) when several workers must share them.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from twixel.config import settings

# key_func=get_remote_address: one budget per client IP address
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
