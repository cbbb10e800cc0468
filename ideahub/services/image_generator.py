"""
Illustration generation using Google's Imagen model.

Returns the generated JPEG inline as a base64 data URL, which is stored
directly in `ideas.image_url`.
"""

from typing import Optional

import requests
from loguru import logger

from ideahub.config import GOOGLE_AI_API_KEY, GOOGLE_IMAGE_MODEL, REQUEST_TIMEOUT
from ideahub.services.base import (
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
    first_item,
    is_blank,
    json_object,
)


SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class ImageGenerator:
    """Single-shot image generation through the Generative Language API."""

    API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or GOOGLE_AI_API_KEY
        self.model = model or GOOGLE_IMAGE_MODEL

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def _endpoint(self) -> str:
        return f"{self.API_BASE}/{self.model}:generateImage"

    def generate(self, prompt: str) -> ServiceResult:
        """
        Generate one image for a prompt.

        Returns:
            ServiceResult with data {"imageUrl": "data:image/jpeg;base64,..."}.
        """
        if is_blank(prompt):
            return ServiceResult.failed("Prompt is required", MISSING_INPUT)

        if not self.is_available():
            return ServiceResult.failed("Google AI API key not configured", NOT_CONFIGURED)

        logger.info(f"Generating image with prompt: {prompt[:80]}")

        payload = {
            "prompt": prompt,
            "safetySettings": SAFETY_SETTINGS,
            "generationConfig": {"responseMimeType": "image/jpeg"},
        }

        try:
            response = requests.post(
                self._endpoint,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
            if response.status_code != 200:
                logger.warning(f"Google AI API error ({response.status_code}): {response.text[:500]}")
                return ServiceResult.failed(f"Google AI API error: {response.status_code}")

            data = json_object(response)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Error generating image: {e}")
            return ServiceResult.failed(f"API error: {e}")

        image = first_item(data.get("candidates")).get("image")
        encoded = image.get("data") if isinstance(image, dict) else None
        if is_blank(encoded):
            return ServiceResult.failed("No image generated")

        logger.info("Image generation response received")
        return ServiceResult.ok(imageUrl=f"data:image/jpeg;base64,{encoded}")
