"""
Test Configuration - Externalized Test Data

This file contains all configurable test data, expected values, and test parameters.
Update values here when requirements change - no need to modify test scripts.

Structure:
- CONFIG: General test configuration
- EXPECTED: Expected values for validation tests
- TEST_DATA: Test input data (users, ideas, groups, API payloads)
- MESSAGES: Expected error and notification messages
- TEST_CATEGORIES: Report metadata per test module
"""

import copy
from typing import Dict, List, Any


# =============================================================================
# GENERAL TEST CONFIGURATION
# =============================================================================

CONFIG = {
    "environments": {
        "production": "production",
        "development": "development",
    },

    "statuses": ["idea", "research", "progress", "launched", "archived"],
    "colors": ["yellow", "blue", "green", "pink", "purple", "orange", "gray"],
    "themes": ["system", "light", "dark"],

    "supabase_url": "https://project.supabase.co",
    "supabase_anon_key": "anon-key-123",
    "access_token": "access-token-abc",
    "image_bucket": "idea-images",

    "test_output_dir": "test_results",
}


# =============================================================================
# EXPECTED VALUES FOR VALIDATION
# =============================================================================

EXPECTED = {
    "config": {
        "required_production_vars": [
            "SUPABASE_URL",
            "SUPABASE_ANON_KEY",
        ],
        "default_secret_key": "dev-secret-key-change-me",
        "default_request_timeout": 60,
        "default_bucket": "idea-images",
    },

    "idea_defaults": {
        "status": "idea",
        "color": "gray",
        "description": "",
    },

    "settings_defaults": {
        "auto_image_generation": False,
        "ai_description_enhancement": False,
        "markdown_preview": True,
        "developer_mode": False,
        "theme": "system",
    },

    "services": {
        "deepseek_url": "https://api.deepseek.com/chat/completions",
        "deepseek_model": "deepseek-chat",
        "temperature": 0.7,
        "max_tokens": 2000,
        "image_model": "imagen-3.0-generate-001",
        "screenshot_url": "https://hcti.io/v1/image",
        "viewport": (1280, 720),
    },

    "auth": {
        "min_password_length": 6,
    },

    "gesture": {
        "long_press_seconds": 0.5,
    },
}


# =============================================================================
# TEST INPUT DATA
# =============================================================================

TEST_DATA = {
    "users": [
        {"id": "user-1", "email": "ada@example.com"},
        {"id": "user-2", "email": "grace@example.com"},
    ],

    "profiles": [
        {"user_id": "user-1", "display_name": "Ada Lovelace", "avatar_color": "#8B5CF6"},
    ],

    # Listed oldest first; created in this order they come back newest first
    "sample_ideas": [
        {
            "title": "Recipe App",
            "description": "Share and discover family recipes",
            "status": "idea",
            "tags": ["food", "social"],
            "color": "yellow",
        },
        {
            "title": "Habit Tracker",
            "description": "Daily streaks with gentle reminders",
            "status": "progress",
            "tags": ["health", "productivity"],
            "color": "green",
        },
        {
            "title": "Budget Buddy",
            "description": "Split shared expenses between roommates",
            "status": "launched",
            "tags": ["finance", "social"],
            "color": "blue",
        },
        {
            "title": "Plant Care Reminder",
            "description": "Photo-based watering schedule for house plants",
            "status": "research",
            "tags": [],
            "color": "gray",
        },
    ],

    "sample_groups": [
        {"name": "Side Projects", "description": "Weekend builds", "color": "#3B82F6", "icon": "🚀"},
        {"name": "Startup Ideas", "description": "", "color": "#EF4444", "icon": "💡"},
    ],

    # Raw PostgREST rows
    "idea_row": {
        "id": "idea-1",
        "user_id": "user-1",
        "title": "Recipe App",
        "description": "Share and discover family recipes",
        "status": "idea",
        "tags": ["food", "social"],
        "color": "yellow",
        "image_url": None,
        "original_description": None,
        "group_id": None,
        "created_at": "2025-01-15T10:30:00Z",
        "updated_at": "2025-01-15T10:30:00Z",
    },

    "group_row": {
        "id": "group-1",
        "user_id": "user-1",
        "name": "Side Projects",
        "description": "Weekend builds",
        "color": "#3B82F6",
        "icon": "🚀",
        "created_at": "2025-01-10T08:00:00Z",
        "updated_at": "2025-01-10T08:00:00Z",
    },

    "settings_row": {
        "id": "settings-1",
        "user_id": "user-1",
        "auto_image_generation": True,
        "ai_description_enhancement": True,
        "markdown_preview": False,
        "developer_mode": False,
        "theme": "dark",
    },

    # Auth server responses
    "auth_token_response": {
        "access_token": "access-token-abc",
        "refresh_token": "refresh-token-xyz",
        "token_type": "bearer",
        "user": {"id": "user-1", "email": "ada@example.com"},
    },

    "auth_signup_pending_response": {
        "id": "user-3",
        "email": "new@example.com",
    },

    # Third-party API responses
    "deepseek_response": {
        "choices": [
            {"message": {"role": "assistant", "content": "## Recipe App\n\n- Family cookbooks\n- Meal plans\n"}}
        ]
    },

    "imagen_response": {
        "candidates": [{"image": {"data": "aGVsbG8="}}]
    },

    "screenshot_response": {
        "url": "https://hcti.io/v1/image/abc123"
    },
}


# =============================================================================
# EXPECTED MESSAGES
# =============================================================================

MESSAGES = {
    "errors": {
        "deepseek_not_configured": "Deepseek API key not configured",
        "google_not_configured": "Google AI API key not configured",
        "no_enhanced_description": "No enhanced description generated",
        "no_image": "No image generated",
        "url_required": "URL is required",
        "no_screenshot": "No screenshot URL returned",
        "passwords_mismatch": "Passwords don't match",
        "password_too_short": "Password must be at least 6 characters long",
        "not_signed_in": "Not signed in",
        "idea_not_found": "Idea not found",
    },

    "notifications": {
        "idea_saved": "Idea saved!",
        "idea_updated": "Idea updated",
        "idea_deleted": "Idea deleted",
        "group_created": "Group created! 🎉",
        "settings_saved": "Settings saved",
        "enhanced": "Description enhanced! ✨",
        "load_failed": "Error loading ideas",
    },
}


# =============================================================================
# TEST CATEGORY METADATA (for the result report)
# =============================================================================

TEST_CATEGORIES = {
    "models": {
        "name": "Models",
        "description": "Idea, group, settings and profile records",
        "protects_against": [
            "Invalid status or color reaching the database",
            "Rows with missing optional columns failing to load",
        ],
    },
    "storage": {
        "name": "Storage",
        "description": "PostgREST adapter and in-memory mock",
        "protects_against": [
            "Queries not scoped to the signed-in user",
            "Backend errors escaping as untyped exceptions",
        ],
    },
    "auth": {
        "name": "Auth",
        "description": "Sign-up validation, sign-in, sign-out",
        "protects_against": [
            "Weak or mismatched passwords being sent to the server",
            "A failed server logout keeping the user signed in",
        ],
    },
    "repositories": {
        "name": "Repositories",
        "description": "In-memory mirrors of ideas, groups and settings",
        "protects_against": [
            "Local list drifting from the backend after failures",
            "Writes issued without a signed-in user",
        ],
    },
    "filters": {
        "name": "Filters",
        "description": "Search, status and tag filtering",
        "protects_against": [
            "Reordered results",
            "Tag selection treated as AND instead of OR",
        ],
    },
    "services": {
        "name": "Services",
        "description": "Deepseek, Imagen and screenshot clients",
        "protects_against": [
            "Missing API keys reported as upstream failures",
            "Malformed upstream responses crashing the request",
        ],
    },
    "actions": {
        "name": "Idea Actions",
        "description": "Enhance, undo, image generation, screenshots, uploads",
        "protects_against": [
            "Lost original description after enhancement",
            "Duplicate AI submissions for the same idea",
        ],
    },
    "gestures": {
        "name": "Press Gesture",
        "description": "Short press versus long press",
        "protects_against": [
            "Both actions firing for a single press",
        ],
    },
    "web_app": {
        "name": "Web API",
        "description": "Flask routes, status codes and notifications",
        "protects_against": [
            "Unauthenticated access to user data",
            "Wrong status codes for disabled or unconfigured features",
        ],
    },
    "app_config": {
        "name": "Configuration",
        "description": "Environment loading and validation",
        "protects_against": [
            "Production running with the default secret key",
        ],
    },
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_sample_idea(index: int = 0) -> Dict[str, Any]:
    """Get a copy of a sample idea draft by index."""
    ideas = TEST_DATA["sample_ideas"]
    return copy.deepcopy(ideas[index % len(ideas)])


def get_all_sample_ideas() -> List[Dict[str, Any]]:
    """Get copies of all sample idea drafts."""
    return copy.deepcopy(TEST_DATA["sample_ideas"])


def get_sample_group(index: int = 0) -> Dict[str, Any]:
    groups = TEST_DATA["sample_groups"]
    return copy.deepcopy(groups[index % len(groups)])


def get_row(name: str) -> Dict[str, Any]:
    """Get a copy of a raw backend row or API response by key."""
    return copy.deepcopy(TEST_DATA[name])
