"""
Application settings and environment configuration.

Purpose:
- Centralize all config (store backend, Redis, logging, notification defaults)
- Load from environment variables for 12-factor app compliance
- Provide sensible defaults for local development
"""
import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # API Configuration
    API_TITLE: str = "Notification Mailbox API"
    API_VERSION: str = "0.1"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Key-value store backend
    # Values: memory (process-local, dev/tests), redis
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory")

    # Redis: persistent key-value store for notifications and subscriptions
    # Format: redis://host:port/db
    # Example: redis://localhost:6379/0
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Logging: configure logging level
    # Values: DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Default notification max age in seconds (30 days)
    NOTIFICATION_MAX_AGE_SEC: int = int(os.getenv("NOTIFICATION_MAX_AGE_SEC", str(30 * 86400)))

    class Config:
        env_file = ".env"  # Load from .env file if present
        extra = "allow"

# Global settings instance
settings = Settings()
