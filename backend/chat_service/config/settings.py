"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    TESTING = _flag("TESTING")
    DEBUG = _flag("DEBUG")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth (tokens are issued elsewhere, we only verify them)
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ALGORITHM = os.getenv("SERVICE_AUTH_ALGORITHM", "HS256")

    # Storage: "memory" keeps everything in-process, "prisma" uses PostgreSQL
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Redis settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")

    # Profile cache
    PROFILE_CACHE_BACKEND: str = os.getenv("PROFILE_CACHE_BACKEND", "memory")
    PROFILE_CACHE_TTL: int = int(os.getenv("PROFILE_CACHE_TTL", "86400"))  # 24 hours
    # How long expired entries are kept around as stale fallback
    PROFILE_STALE_RETENTION: int = int(os.getenv("PROFILE_STALE_RETENTION", "604800"))
    PROFILE_FETCH_TIMEOUT: float = float(os.getenv("PROFILE_FETCH_TIMEOUT", "5"))

    # External identity service
    PROFILE_SERVICE_URL: str = os.getenv("PROFILE_SERVICE_URL", "")
    PROFILE_SERVICE_TOKEN: str = os.getenv("PROFILE_SERVICE_TOKEN", "")

    # Messages
    MESSAGE_PAGE_DEFAULT: int = int(os.getenv("MESSAGE_PAGE_DEFAULT", "50"))
    MESSAGE_PAGE_MAX: int = int(os.getenv("MESSAGE_PAGE_MAX", "100"))
    MESSAGE_MAX_LENGTH: int = int(os.getenv("MESSAGE_MAX_LENGTH", "4000"))
    MESSAGE_APPEND_MAX_ATTEMPTS: int = int(os.getenv("MESSAGE_APPEND_MAX_ATTEMPTS", "3"))

    # Conversations
    # Optional safety cap on GET /conversations; 0 returns every conversation
    CONVERSATION_USER_LIMIT: int = int(os.getenv("CONVERSATION_USER_LIMIT", "0"))

    # Realtime
    TYPING_TIMEOUT: float = float(os.getenv("TYPING_TIMEOUT", "5"))  # seconds


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORAGE_BACKEND = "memory"
    PROFILE_CACHE_BACKEND = "memory"
    PROFILE_SERVICE_URL = ""


class ProductionConfig(Config):
    """Production configuration"""

    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "prisma")
    PROFILE_CACHE_BACKEND = os.getenv("PROFILE_CACHE_BACKEND", "redis")


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
