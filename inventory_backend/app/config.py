#!/usr/bin/env python3
"""
Configuration management for the inventory backend.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_DEFAULT_DB_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "inventory.db")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Configuration class for the application."""

    # Database Configuration
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{_DEFAULT_DB_PATH}")
    DB_ECHO = _env_bool("DB_ECHO")

    # Gemini (Google) API Configuration
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", 20))
    LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", 450))

    # Translation
    WORKING_LANGUAGE = os.getenv("WORKING_LANGUAGE", "en")
    TRANSLATION_TIMEOUT_SECONDS = float(os.getenv("TRANSLATION_TIMEOUT_SECONDS", 15))

    # Business rules
    TAX_RATE = float(os.getenv("TAX_RATE", 0.05))
    DEFAULT_LOW_STOCK_THRESHOLD = int(os.getenv("DEFAULT_LOW_STOCK_THRESHOLD", 10))
    CHAT_RESULT_LIMIT = int(os.getenv("CHAT_RESULT_LIMIT", 10))

    # Application Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    @classmethod
    def debug_print(cls):
        print(f"[CONFIG] DATABASE_URL={cls.DATABASE_URL}")
        print(f"[CONFIG] GEMINI_MODEL={cls.GEMINI_MODEL} set={bool(cls.GEMINI_API_KEY)}")
        print(f"[CONFIG] LLM_TIMEOUT_SECONDS={cls.LLM_TIMEOUT_SECONDS} TRANSLATION_TIMEOUT_SECONDS={cls.TRANSLATION_TIMEOUT_SECONDS}")
        print(f"[CONFIG] TAX_RATE={cls.TAX_RATE} DEFAULT_LOW_STOCK_THRESHOLD={cls.DEFAULT_LOW_STOCK_THRESHOLD}")

    @classmethod
    def validate(cls):
        """Validate configuration values."""
        problems = []

        if cls.LLM_TIMEOUT_SECONDS <= 0:
            problems.append("LLM_TIMEOUT_SECONDS must be positive")
        if cls.TRANSLATION_TIMEOUT_SECONDS <= 0:
            problems.append("TRANSLATION_TIMEOUT_SECONDS must be positive")
        if not 0 <= cls.TAX_RATE < 1:
            problems.append("TAX_RATE must be in [0, 1)")
        if cls.DEFAULT_LOW_STOCK_THRESHOLD < 0:
            problems.append("DEFAULT_LOW_STOCK_THRESHOLD must not be negative")
        # A missing GEMINI_API_KEY is allowed: chat degrades to canned replies

        if problems:
            raise ValueError(f"Invalid configuration: {', '.join(problems)}")

        return True

# Validate configuration on import
Config.validate()
