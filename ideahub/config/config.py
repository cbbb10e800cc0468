"""
Configuration module for Idea Hub.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# The .env file lives in the project root (parent of ideahub/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Log level for the stderr sink; DEBUG=true forces "DEBUG"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Optional log file path (empty = stderr only)
LOG_FILE: str = os.getenv("LOG_FILE", "")

# Secret used to sign the browser-session cookie
DEFAULT_SECRET_KEY = "dev-secret-key-change-me"
FLASK_SECRET_KEY: str = os.getenv("FLASK_SECRET_KEY", DEFAULT_SECRET_KEY)


# =============================================================================
# Supabase Configuration
# =============================================================================

# Project URL, e.g. https://abcd1234.supabase.co
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")

# Public anon key; row level security scopes every query to the signed-in user
SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

# Storage bucket for idea images (must be public)
SUPABASE_IMAGE_BUCKET: str = os.getenv("SUPABASE_IMAGE_BUCKET", "idea-images")


# =============================================================================
# External Services (server-managed default keys)
# =============================================================================

# Deepseek key for description enhancement
DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")
DEEPSEEK_MODEL: str = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")

# Google AI key for image generation
GOOGLE_AI_API_KEY: str = os.getenv("GOOGLE_AI_API_KEY", "")
GOOGLE_IMAGE_MODEL: str = os.getenv("GOOGLE_IMAGE_MODEL", "imagen-3.0-generate-001")

# htmlcsstoimage.com credentials for screenshot capture
HTMLCSS_USER_ID: str = os.getenv("HTMLCSS_USER_ID", "")
HTMLCSS_API_KEY: str = os.getenv("HTMLCSS_API_KEY", "")

# HTTP request timeout in seconds
# Default: 60 seconds - image generation is slow
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "60"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def is_supabase_configured() -> bool:
    """Check if the Supabase project URL and anon key are both set."""
    return bool(SUPABASE_URL and SUPABASE_ANON_KEY)


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production():
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_ANON_KEY:
            errors.append("SUPABASE_ANON_KEY is required in production")
        if FLASK_SECRET_KEY == DEFAULT_SECRET_KEY:
            errors.append("FLASK_SECRET_KEY must be changed in production")

    if SUPABASE_URL and not SUPABASE_URL.startswith(("http://", "https://")):
        errors.append("SUPABASE_URL must start with http:// or https://")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if LOG_LEVEL not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL is not a valid level: {LOG_LEVEL}")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_ANON_KEY: {'***' if SUPABASE_ANON_KEY else '(not set)'}")
    print(f"  SUPABASE_IMAGE_BUCKET: {SUPABASE_IMAGE_BUCKET}")
    print(f"  DEEPSEEK_API_KEY: {'***' if DEEPSEEK_API_KEY else '(not set)'}")
    print(f"  GOOGLE_AI_API_KEY: {'***' if GOOGLE_AI_API_KEY else '(not set)'}")
    print(f"  HTMLCSS_API_KEY: {'***' if HTMLCSS_API_KEY else '(not set)'}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
