"""
Website screenshots via htmlcsstoimage.com.

The service renders the page and hosts the PNG; we only keep its URL.
"""

from typing import Optional

import requests
from loguru import logger

from ideahub.config import HTMLCSS_USER_ID, HTMLCSS_API_KEY, REQUEST_TIMEOUT
from ideahub.services.base import (
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
    is_blank,
    json_object,
)


class ScreenshotCapture:
    """Capture a 1280x720 screenshot of a URL."""

    API_URL = "https://hcti.io/v1/image"

    VIEWPORT_WIDTH = 1280
    VIEWPORT_HEIGHT = 720

    def __init__(self, user_id: Optional[str] = None, api_key: Optional[str] = None):
        self.user_id = user_id or HTMLCSS_USER_ID
        self.api_key = api_key or HTMLCSS_API_KEY

    def is_available(self) -> bool:
        return bool(self.user_id and self.api_key)

    def capture(self, url: str) -> ServiceResult:
        """
        Returns:
            ServiceResult with data {"imageUrl": <hosted screenshot URL>}.
        """
        if is_blank(url):
            return ServiceResult.failed("URL is required", MISSING_INPUT)

        if not self.is_available():
            return ServiceResult.failed("Screenshot service not configured", NOT_CONFIGURED)

        logger.info(f"Capturing screenshot for URL: {url}")

        payload = {
            "url": url.strip(),
            "viewport_width": self.VIEWPORT_WIDTH,
            "viewport_height": self.VIEWPORT_HEIGHT,
            "device_scale": 1,
        }

        try:
            response = requests.post(
                self.API_URL,
                auth=(self.user_id, self.api_key),
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
            if not response.ok:
                logger.warning(f"Screenshot API error ({response.status_code}): {response.text[:500]}")
                return ServiceResult.failed(f"Screenshot API error: {response.status_code}")

            data = json_object(response)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Error capturing screenshot: {e}")
            return ServiceResult.failed(f"API error: {e}")

        image_url = data.get("url")
        if is_blank(image_url):
            return ServiceResult.failed("No screenshot URL returned")

        logger.info("Screenshot captured successfully")
        return ServiceResult.ok(imageUrl=image_url)
