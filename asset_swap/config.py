"""
Centralized configuration management for the asset swap negotiation.
Loads settings from environment variables and provides defaults.
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Negotiation Settings
    # The scan visits 2**n candidates; inputs above this are refused at the boundary.
    MAX_ASSETS: int = int(os.getenv("ASSET_SWAP_MAX_ASSETS", 20))
    DEFAULT_SEED: int = int(os.getenv("ASSET_SWAP_SEED", 0))
    DEFAULT_VALUATION_LOW: int = int(os.getenv("ASSET_SWAP_VALUATION_LOW", 0))
    DEFAULT_VALUATION_HIGH: int = int(os.getenv("ASSET_SWAP_VALUATION_HIGH", 100))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")

    # Development/Production
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    def __init__(self):
        self._validate_settings()

    def _validate_settings(self):
        """Validate critical settings."""
        if self.MAX_ASSETS < 0:
            raise ValueError("ASSET_SWAP_MAX_ASSETS must be non-negative")
        if self.DEFAULT_VALUATION_HIGH <= self.DEFAULT_VALUATION_LOW:
            raise ValueError("ASSET_SWAP_VALUATION_HIGH must exceed ASSET_SWAP_VALUATION_LOW")
        if self.ENVIRONMENT == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            key: getattr(self, key)
            for key in dir(self)
            if key.isupper() and not key.startswith("_")
        }

    def get_logging_config(self) -> dict:
        """Get logging configuration for ``logging.config.dictConfig``."""
        level = "DEBUG" if self.DEBUG else self.LOG_LEVEL
        handlers: Dict[str, dict] = {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
            },
        }
        if self.LOG_FILE:
            handlers['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': self.LOG_FILE,
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'formatter': 'json' if self.ENVIRONMENT == 'production' else 'default',
            }
        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                },
                'json': {
                    'class': 'pythonjsonlogger.json.JsonFormatter',
                    'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                },
            },
            'handlers': handlers,
            'root': {
                'level': level,
                'handlers': list(handlers),
            },
        }


# Singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
