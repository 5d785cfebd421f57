"""Application settings and configuration management."""

import logging
import os
from pathlib import Path
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).parent.parent


class Settings:
    """Application settings loaded from environment variables."""

    # REST API
    API_BASE_URL: str = os.getenv("SCHOOL_API_URL", "http://localhost:4000/api")
    REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    # Server / database
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'school_results.db'}")
    SERVER_HOST: str = os.getenv("SERVER_HOST", "127.0.0.1")
    SERVER_PORT: int = int(os.getenv("SERVER_PORT", "4000"))
    BATCH_CHUNK_SIZE: int = 100  # rows per INSERT inside one batch transaction

    # Seed account, created on server startup when missing
    DEFAULT_ADMIN_USERNAME: str = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    # UI behaviour
    MAX_COMPARISON_SCHOOLS: int = 4
    MAX_IMPORT_ERRORS_SHOWN: int = 5
    SUCCESS_MESSAGE_TTL_SECONDS: int = 4
    IMPORT_MESSAGE_TTL_SECONDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Exported school report banner
    REPORT_BANNER_LINES: list = [
        "وكالة الغوث الدولية - برنامج التربية والتعليم",
        "مركز التطوير التربوي - وحدة التقويم",
    ]
    REPORT_SHEET_TITLE: str = "تقرير المدارس"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


_logging_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Apply LOG_LEVEL to the root logger once per process."""
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, (level or get_settings().LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _logging_configured = True
