"""
Configuration module.

Handles environment variables, API keys, and application settings.
"""

from ideahub.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    LOG_FILE,
    DEFAULT_SECRET_KEY,
    FLASK_SECRET_KEY,
    SUPABASE_URL,
    SUPABASE_ANON_KEY,
    SUPABASE_IMAGE_BUCKET,
    DEEPSEEK_API_KEY,
    DEEPSEEK_MODEL,
    GOOGLE_AI_API_KEY,
    GOOGLE_IMAGE_MODEL,
    HTMLCSS_USER_ID,
    HTMLCSS_API_KEY,
    REQUEST_TIMEOUT,
    is_production,
    is_development,
    is_supabase_configured,
    validate_config,
    print_config_summary,
)
from ideahub.config.logging_config import configure_logging

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_FILE",
    "DEFAULT_SECRET_KEY",
    "FLASK_SECRET_KEY",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_IMAGE_BUCKET",
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_MODEL",
    "GOOGLE_AI_API_KEY",
    "GOOGLE_IMAGE_MODEL",
    "HTMLCSS_USER_ID",
    "HTMLCSS_API_KEY",
    "REQUEST_TIMEOUT",
    "is_production",
    "is_development",
    "is_supabase_configured",
    "validate_config",
    "print_config_summary",
    "configure_logging",
]
