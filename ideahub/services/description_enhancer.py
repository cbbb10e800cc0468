"""
AI description enhancement using Deepseek.

Rewrites a short idea description into a detailed, markdown-formatted
pitch. Uses Deepseek's OpenAI-compatible chat completions endpoint.
"""

from typing import Optional

import requests
from loguru import logger

from ideahub.config import DEEPSEEK_API_KEY, DEEPSEEK_MODEL, REQUEST_TIMEOUT
from ideahub.services.base import (
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
    first_item,
    is_blank,
    json_object,
)


SYSTEM_PROMPT = (
    "You are an expert technical writer and app idea enhancer. Your job is to take basic "
    "app ideas and descriptions and enhance them with detailed features, technical "
    "considerations, market potential, and implementation suggestions. Make the description "
    "comprehensive, professional, and inspiring while keeping the core idea intact. Use "
    "markdown formatting for better readability."
)


class DescriptionEnhancer:
    """AI-powered description enhancement using the Deepseek API."""

    API_URL = "https://api.deepseek.com/chat/completions"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        # A user-supplied key (developer mode) wins over the server default
        self.api_key = api_key or DEEPSEEK_API_KEY
        self.model = model or DEEPSEEK_MODEL

    def is_available(self) -> bool:
        """Check if enhancement is available (API key configured)."""
        return bool(self.api_key)

    def enhance(self, title: str, description: str = "") -> ServiceResult:
        """
        Produce an enhanced description for an idea.

        Args:
            title: The idea's title (required).
            description: The current description (may be empty).

        Returns:
            ServiceResult with data {"enhancedDescription": ...} or an error.
        """
        if is_blank(title):
            return ServiceResult.failed("Title is required", MISSING_INPUT)
        if description is not None and not isinstance(description, str):
            return ServiceResult.failed("Description must be text", MISSING_INPUT)

        if not self.is_available():
            return ServiceResult.failed("Deepseek API key not configured", NOT_CONFIGURED)

        logger.info(f"Enhancing description for: {title}")

        try:
            return self._call_api(self._build_prompt(title, description or ""))
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.warning(f"Error enhancing description: {e}")
            return ServiceResult.failed(f"API error: {e}")

    def _build_prompt(self, title: str, description: str) -> str:
        return f"""Please enhance this app idea description:

Title: {title}
Current Description: {description}

Please provide an enhanced, detailed description that includes:
- Detailed feature breakdown
- Technical implementation considerations
- Market potential and target audience
- Monetization strategies
- Development roadmap suggestions
- Competitive advantages

Keep the writing engaging and professional. Use markdown formatting with headers, bullet points, and emphasis where appropriate."""

    def _call_api(self, prompt: str) -> ServiceResult:
        """Make one API call to Deepseek."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.7,
            "max_tokens": 2000,
        }

        response = requests.post(
            self.API_URL,
            headers=headers,
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )

        if response.status_code != 200:
            logger.warning(f"Deepseek API error ({response.status_code}): {response.text[:500]}")
            return ServiceResult.failed(f"Deepseek API error: {response.status_code}")

        data = json_object(response)
        message = first_item(data.get("choices")).get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if is_blank(content):
            return ServiceResult.failed("No enhanced description generated")

        logger.info("Description enhancement completed")
        return ServiceResult.ok(enhancedDescription=content.strip())
