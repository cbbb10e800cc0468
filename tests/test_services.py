"""
Tests for the external service clients.

Tests DescriptionEnhancer, ImageGenerator, ScreenshotCapture and the
ServiceResult envelope: request shapes, key selection and the
missing_input / not_configured / upstream error taxonomy.
"""

import pytest
from unittest.mock import Mock, patch
import requests

from ideahub.services import (
    DescriptionEnhancer,
    ImageGenerator,
    ScreenshotCapture,
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
    UPSTREAM,
)
from ideahub.services.description_enhancer import SYSTEM_PROMPT
from tests.test_config import EXPECTED, MESSAGES, get_row


# =============================================================================
# Test Fixtures
# =============================================================================

def make_response(status_code=200, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def enhancer():
    return DescriptionEnhancer(api_key="deepseek-test-key")


@pytest.fixture
def enhancer_without_key():
    enhancer = DescriptionEnhancer(api_key="")
    # Force the api_key to empty string (bypassing env fallback)
    enhancer.api_key = ""
    return enhancer


@pytest.fixture
def generator():
    return ImageGenerator(api_key="google-test-key")


@pytest.fixture
def screenshots():
    return ScreenshotCapture(user_id="hcti-user", api_key="hcti-key")


# =============================================================================
# ServiceResult
# =============================================================================

class TestServiceResult:

    def test_success_envelope(self):
        result = ServiceResult.ok(imageUrl="https://x/y.png")
        assert result.to_envelope() == {"success": True, "imageUrl": "https://x/y.png"}

    def test_failure_envelope(self):
        result = ServiceResult.failed("boom")
        assert result.error_kind == UPSTREAM
        assert result.to_envelope() == {"success": False, "error": "boom"}

    def test_not_configured_flag(self):
        assert ServiceResult.failed("no key", NOT_CONFIGURED).not_configured
        assert not ServiceResult.failed("boom").not_configured


# =============================================================================
# DescriptionEnhancer
# =============================================================================

class TestDescriptionEnhancer:
    """Tests for the Deepseek client."""

    def test_explicit_key_overrides_default(self):
        with patch("ideahub.services.description_enhancer.DEEPSEEK_API_KEY", "server-key"):
            assert DescriptionEnhancer(api_key="user-key").api_key == "user-key"
            assert DescriptionEnhancer().api_key == "server-key"

    def test_missing_title(self, enhancer):
        with patch("requests.post") as mock_post:
            result = enhancer.enhance("  ", "desc")
        assert result.error_kind == MISSING_INPUT
        mock_post.assert_not_called()

    @pytest.mark.parametrize("title, description", [(5, ""), (None, ""), ("Recipe App", ["x"])])
    def test_non_string_input(self, enhancer, title, description):
        with patch("requests.post") as mock_post:
            result = enhancer.enhance(title, description)
        assert result.error_kind == MISSING_INPUT
        mock_post.assert_not_called()

    def test_not_configured(self, enhancer_without_key):
        result = enhancer_without_key.enhance("Recipe App", "desc")
        assert not result.success
        assert result.error_kind == NOT_CONFIGURED
        assert result.error == MESSAGES["errors"]["deepseek_not_configured"]

    @patch("requests.post")
    def test_request_shape(self, mock_post, enhancer):
        mock_post.return_value = make_response(json_data=get_row("deepseek_response"))
        enhancer.enhance("Recipe App", "Share recipes")

        args, kwargs = mock_post.call_args
        assert args[0] == EXPECTED["services"]["deepseek_url"]
        assert kwargs["headers"]["Authorization"] == "Bearer deepseek-test-key"
        payload = kwargs["json"]
        assert payload["model"] == EXPECTED["services"]["deepseek_model"]
        assert payload["temperature"] == EXPECTED["services"]["temperature"]
        assert payload["max_tokens"] == EXPECTED["services"]["max_tokens"]
        assert payload["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert "Title: Recipe App" in payload["messages"][1]["content"]
        assert "Current Description: Share recipes" in payload["messages"][1]["content"]

    @patch("requests.post")
    def test_success(self, mock_post, enhancer):
        mock_post.return_value = make_response(json_data=get_row("deepseek_response"))
        result = enhancer.enhance("Recipe App", "Share recipes")
        assert result.success
        assert result.data["enhancedDescription"].startswith("## Recipe App")
        assert result.to_envelope()["enhancedDescription"] == result.data["enhancedDescription"]

    @patch("requests.post")
    def test_http_error(self, mock_post, enhancer):
        mock_post.return_value = make_response(401, text="unauthorized")
        result = enhancer.enhance("Recipe App")
        assert result.error == "Deepseek API error: 401"
        assert result.error_kind == UPSTREAM

    @patch("requests.post")
    def test_empty_choices(self, mock_post, enhancer):
        mock_post.return_value = make_response(json_data={"choices": []})
        result = enhancer.enhance("Recipe App")
        assert result.error == MESSAGES["errors"]["no_enhanced_description"]

    @patch("requests.post")
    def test_non_object_body(self, mock_post, enhancer):
        mock_post.return_value = make_response(json_data=["not", "an", "object"])
        result = enhancer.enhance("Recipe App")
        assert result.error_kind == UPSTREAM
        assert result.to_envelope()["success"] is False

    @patch("requests.post")
    def test_malformed_choice(self, mock_post, enhancer):
        mock_post.return_value = make_response(json_data={"choices": ["text"]})
        assert enhancer.enhance("Recipe App").error == MESSAGES["errors"]["no_enhanced_description"]

    @patch("requests.post")
    def test_network_error(self, mock_post, enhancer):
        mock_post.side_effect = requests.ConnectionError("refused")
        result = enhancer.enhance("Recipe App")
        assert not result.success
        assert "refused" in result.error


# =============================================================================
# ImageGenerator
# =============================================================================

class TestImageGenerator:
    """Tests for the Imagen client."""

    @patch("requests.post")
    def test_request_shape(self, mock_post, generator):
        mock_post.return_value = make_response(json_data=get_row("imagen_response"))
        generator.generate("A cozy kitchen")

        args, kwargs = mock_post.call_args
        assert args[0].endswith(f"/models/{EXPECTED['services']['image_model']}:generateImage")
        assert kwargs["params"] == {"key": "google-test-key"}
        body = kwargs["json"]
        assert body["prompt"] == "A cozy kitchen"
        assert body["generationConfig"] == {"responseMimeType": "image/jpeg"}
        categories = {s["category"] for s in body["safetySettings"]}
        assert categories == {"HARM_CATEGORY_HATE_SPEECH", "HARM_CATEGORY_DANGEROUS_CONTENT"}
        assert all(s["threshold"] == "BLOCK_MEDIUM_AND_ABOVE" for s in body["safetySettings"])

    @patch("requests.post")
    def test_success_returns_data_url(self, mock_post, generator):
        mock_post.return_value = make_response(json_data=get_row("imagen_response"))
        result = generator.generate("A cozy kitchen")
        assert result.data == {"imageUrl": "data:image/jpeg;base64,aGVsbG8="}

    @patch("requests.post")
    def test_no_candidates(self, mock_post, generator):
        mock_post.return_value = make_response(json_data={"candidates": []})
        assert generator.generate("x").error == MESSAGES["errors"]["no_image"]

    @patch("requests.post")
    def test_http_error(self, mock_post, generator):
        mock_post.return_value = make_response(500, text="internal")
        result = generator.generate("x")
        assert result.error_kind == UPSTREAM
        assert "500" in result.error

    def test_not_configured(self):
        generator = ImageGenerator(api_key="")
        generator.api_key = ""
        result = generator.generate("x")
        assert result.error == MESSAGES["errors"]["google_not_configured"]
        assert result.error_kind == NOT_CONFIGURED

    def test_missing_prompt(self, generator):
        assert generator.generate("").error_kind == MISSING_INPUT

    def test_non_string_prompt(self, generator):
        assert generator.generate(5).error_kind == MISSING_INPUT

    @patch("requests.post")
    def test_non_object_body(self, mock_post, generator):
        mock_post.return_value = make_response(json_data=[{"image": {"data": "aGVsbG8="}}])
        result = generator.generate("x")
        assert result.error_kind == UPSTREAM

    @patch("requests.post")
    def test_malformed_candidate(self, mock_post, generator):
        mock_post.return_value = make_response(json_data={"candidates": [{"image": "aGVsbG8="}]})
        assert generator.generate("x").error == MESSAGES["errors"]["no_image"]


# =============================================================================
# ScreenshotCapture
# =============================================================================

class TestScreenshotCapture:
    """Tests for the htmlcsstoimage client."""

    def test_missing_url(self, screenshots):
        result = screenshots.capture("")
        assert result.error == MESSAGES["errors"]["url_required"]
        assert result.error_kind == MISSING_INPUT

    def test_non_string_url(self, screenshots):
        with patch("requests.post") as mock_post:
            result = screenshots.capture({"href": "https://example.com"})
        assert result.error_kind == MISSING_INPUT
        mock_post.assert_not_called()

    @patch("requests.post")
    def test_non_object_body(self, mock_post, screenshots):
        mock_post.return_value = make_response(json_data="https://hcti.io/v1/image/abc123")
        assert screenshots.capture("https://example.com").error_kind == UPSTREAM

    @patch("requests.post")
    def test_request_shape(self, mock_post, screenshots):
        mock_post.return_value = make_response(json_data=get_row("screenshot_response"))
        screenshots.capture(" https://example.com ")

        args, kwargs = mock_post.call_args
        assert args[0] == EXPECTED["services"]["screenshot_url"]
        assert kwargs["auth"] == ("hcti-user", "hcti-key")
        width, height = EXPECTED["services"]["viewport"]
        assert kwargs["json"] == {
            "url": "https://example.com",
            "viewport_width": width,
            "viewport_height": height,
            "device_scale": 1,
        }

    @patch("requests.post")
    def test_success(self, mock_post, screenshots):
        mock_post.return_value = make_response(json_data=get_row("screenshot_response"))
        result = screenshots.capture("https://example.com")
        assert result.to_envelope() == {"success": True, "imageUrl": "https://hcti.io/v1/image/abc123"}

    @patch("requests.post")
    def test_no_url_returned(self, mock_post, screenshots):
        mock_post.return_value = make_response(json_data={})
        assert screenshots.capture("https://example.com").error == MESSAGES["errors"]["no_screenshot"]

    def test_not_configured(self):
        capture = ScreenshotCapture()
        capture.user_id = ""
        assert capture.capture("https://example.com").error_kind == NOT_CONFIGURED
