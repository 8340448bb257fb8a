"""
Core module - Configuration, database, Redis and token utilities.
"""

from unidoxia.core.config import get_settings, settings
from unidoxia.core.database import Base, close_db, get_db, init_db
from unidoxia.core.redis import close_redis, get_redis, init_redis
from unidoxia.core.security import create_access_token, decode_token

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Tokens
    "create_access_token",
    "decode_token",
]
