"""
Core module - Configuration, database, clock, security, and utilities.
"""

from schoolcms.core.clock import Clock, FrozenClock, utc_now
from schoolcms.core.config import get_settings, settings
from schoolcms.core.database import Base, close_db, get_db, init_db
from schoolcms.core.redis import close_redis, get_redis, init_redis
from schoolcms.core.security import decode_token

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Clock
    "Clock",
    "FrozenClock",
    "utc_now",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "decode_token",
]
