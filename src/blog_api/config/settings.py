"""
Configuration settings for the Blog Posts API
"""

import os
import logging

logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "DEV")  # DEV, TEST or PROD
DATABASE_URL = os.getenv("DATABASE_URL")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")
PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Connection pool tuning
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]


def get_database_url() -> str:
    """Resolve the connection string for the current environment"""
    url = TEST_DATABASE_URL if ENV == "TEST" else DATABASE_URL
    if not url:
        name = "TEST_DATABASE_URL" if ENV == "TEST" else "DATABASE_URL"
        raise ValueError(f"{name} environment variable is required")
    logger.info(f"Environment: {ENV}")
    return url
