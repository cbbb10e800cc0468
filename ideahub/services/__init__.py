"""
Services module.

Contains external service integrations: description enhancement, image
generation and screenshot capture.
"""

from ideahub.services.base import ServiceResult, MISSING_INPUT, NOT_CONFIGURED, UPSTREAM
from ideahub.services.description_enhancer import DescriptionEnhancer
from ideahub.services.image_generator import ImageGenerator
from ideahub.services.screenshot import ScreenshotCapture

__all__ = [
    "ServiceResult",
    "MISSING_INPUT",
    "NOT_CONFIGURED",
    "UPSTREAM",
    "DescriptionEnhancer",
    "ImageGenerator",
    "ScreenshotCapture",
]
