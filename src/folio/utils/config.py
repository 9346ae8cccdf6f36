"""
Configuration management for the site and its scripts.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class Config:
    """Configuration class for application settings."""

    # Database
    DATABASE_URL = os.getenv('DATABASE_URL')
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', 10))

    # Web
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Locales
    SUPPORTED_LOCALES = ('en', 'fr')
    DEFAULT_LOCALE = os.getenv('DEFAULT_LOCALE', 'en')

    # Admin dashboard (no password means the check is skipped)
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Content
    SITE_AUTHOR = os.getenv('SITE_AUTHOR', 'Nicolas C.')
    CONTENT_DIR = os.getenv('CONTENT_DIR', os.path.join(os.getcwd(), 'content'))
    MESSAGES_DIR = str(PACKAGE_DIR / 'messages')
    MIGRATIONS_DIR = str(PACKAGE_DIR / 'migrations')

    # Logging
    LOG_FILE = os.getenv('LOG_FILE')

    @classmethod
    def validate(cls):
        """
        Validate that all required configuration values are set.

        Raises:
            ConfigurationError: If required configuration is missing
        """
        required_vars = {
            'DATABASE_URL': cls.DATABASE_URL,
        }

        missing = [var for var, value in required_vars.items() if not value]

        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.DEFAULT_LOCALE not in cls.SUPPORTED_LOCALES:
            raise ConfigurationError(
                f"DEFAULT_LOCALE '{cls.DEFAULT_LOCALE}' is not one of: "
                f"{', '.join(cls.SUPPORTED_LOCALES)}"
            )

    @classmethod
    def is_supported_locale(cls, locale: str) -> bool:
        return locale in cls.SUPPORTED_LOCALES
