"""
Berry Ledger configuration.

Settings come from environment variables, with a .env file loaded
first if one exists. DATABASE_URL points at the ledger database
(PostgreSQL in production; the tests set an SQLite URL before
importing anything). LOG_LEVEL is handed to setup_logging() by
both the HTTP server and the berry-import CLI, and follows DEBUG
unless set explicitly. HOST and PORT are only read by run().
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Berry Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/berry"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
