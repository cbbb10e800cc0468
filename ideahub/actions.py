"""
AI and image actions on a single idea.

Each action checks that the feature is enabled in the user's settings,
refuses to start while the same action is already running for the same
idea, calls one external service and then writes the result through the
idea repository. On any failure the idea is left as it was and a
notification explains whether the service is not configured or the call
itself failed.
"""

import threading
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Hashable, Optional, Set

from loguru import logger

from ideahub.keys import DevKeyStore
from ideahub.models.idea import Idea
from ideahub.models.settings import UserSettings
from ideahub.notifications import Notifier
from ideahub.repositories.ideas import IdeaRepository
from ideahub.services import (
    DescriptionEnhancer,
    ImageGenerator,
    ScreenshotCapture,
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
)
from ideahub.storage.base import StorageError


# error_kind values beyond the service ones
SIGNED_OUT = "signed_out"
DISABLED = "disabled"
NOT_FOUND = "not_found"
IN_FLIGHT = "in_flight"
STORAGE = "storage"

IMAGE_PROMPT_DESCRIPTION_CHARS = 200


def build_image_prompt(idea: Idea) -> str:
    description = (idea.description or "")[:IMAGE_PROMPT_DESCRIPTION_CHARS]
    return f"Create a beautiful, professional illustration for an app idea: {idea.title}. {description}"


# =============================================================================
# In-flight guard
# =============================================================================

class InFlightGuard:
    """Set of running (user, idea, action) keys shared across requests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._running: Set[Hashable] = set()

    def acquire(self, key: Hashable) -> bool:
        """Mark key as running. False if it already is."""
        with self._lock:
            if key in self._running:
                return False
            self._running.add(key)
            return True

    def release(self, key: Hashable) -> None:
        with self._lock:
            self._running.discard(key)

    def is_running(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._running


_guard = InFlightGuard()


def get_guard() -> InFlightGuard:
    """Get the process-wide in-flight guard."""
    return _guard


# =============================================================================
# Results
# =============================================================================

@dataclass
class ActionResult:
    """Outcome of one idea action."""
    success: bool
    idea: Optional[Idea] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def failed(cls, error: str, kind: str, idea: Optional[Idea] = None) -> "ActionResult":
        return cls(success=False, idea=idea, error=error, error_kind=kind)


# =============================================================================
# Actions
# =============================================================================

class IdeaActions:
    """
    Enhance, undo, illustrate, screenshot and upload for the signed-in user.

    Service factories take an optional API key and return a client, so a
    developer-mode key can be passed through per call.
    """

    def __init__(
        self,
        repository: IdeaRepository,
        settings: UserSettings,
        notifier: Notifier = None,
        dev_keys: DevKeyStore = None,
        guard: InFlightGuard = None,
        enhancer_factory: Callable[[Optional[str]], DescriptionEnhancer] = DescriptionEnhancer,
        image_generator_factory: Callable[[Optional[str]], ImageGenerator] = ImageGenerator,
        screenshot_factory: Callable[[], ScreenshotCapture] = ScreenshotCapture,
    ):
        self.repository = repository
        self.settings = settings
        self.notifier = notifier if notifier is not None else repository.notifier
        self.dev_keys = dev_keys
        self.guard = guard or get_guard()
        self.enhancer_factory = enhancer_factory
        self.image_generator_factory = image_generator_factory
        self.screenshot_factory = screenshot_factory

    @property
    def user_id(self) -> Optional[str]:
        return self.repository.user_id

    def _dev_key(self, provider: str) -> Optional[str]:
        if not self.settings.developer_mode or self.dev_keys is None:
            return None
        return self.dev_keys.get(provider)

    def _find(self, idea_id: str) -> Optional[Idea]:
        if not self.repository.loaded:
            self.repository.load()
        return self.repository.get(idea_id)

    def _precheck(self, idea_id: str, enabled: bool = True, feature: str = "") -> ActionResult:
        """Common checks; returns a failed result or a success carrying the idea."""
        if not self.user_id:
            return ActionResult.failed("Not signed in", SIGNED_OUT)
        if not enabled:
            self.notifier.error(f"{feature} disabled", f"Enable {feature.lower()} in Settings.")
            return ActionResult.failed(f"{feature} is disabled in settings", DISABLED)
        idea = self._find(idea_id)
        if idea is None:
            return ActionResult.failed("Idea not found", NOT_FOUND)
        return ActionResult(success=True, idea=idea)

    def _service_failed(self, result: ServiceResult, title: str, idea: Idea) -> ActionResult:
        if result.error_kind == NOT_CONFIGURED:
            self.notifier.error(f"{title}: service not configured", result.error)
        else:
            self.notifier.error(title, result.error or "The request failed. Please try again.")
        return ActionResult.failed(result.error, result.error_kind, idea)

    def _save(self, idea: Idea, updates: dict, success_title: str, success_text: str) -> ActionResult:
        updated = self.repository.update(idea.id, updates, notify=False)
        if updated is None:
            self.notifier.error("Error updating idea", "Failed to save the result. Please try again.")
            return ActionResult.failed("Failed to save the idea", STORAGE, idea)
        self.notifier.success(success_title, success_text)
        return ActionResult(success=True, idea=updated)

    def _guarded(self, idea: Idea, action: str, run: Callable[[], ActionResult]) -> ActionResult:
        key = (self.user_id, idea.id, action)
        if not self.guard.acquire(key):
            logger.info(f"Ignoring duplicate {action} for idea {idea.id}")
            return ActionResult.failed("This action is already running for this idea", IN_FLIGHT, idea)
        try:
            return run()
        finally:
            self.guard.release(key)

    # -------------------------------------------------------------------------

    def enhance_description(self, idea_id: str) -> ActionResult:
        """Replace the description with an AI-enhanced one, keeping the original."""
        check = self._precheck(
            idea_id, self.settings.ai_description_enhancement, "AI description enhancement"
        )
        if not check.success:
            return check
        idea = check.idea

        def run() -> ActionResult:
            enhancer = self.enhancer_factory(self._dev_key("deepseek"))
            result = enhancer.enhance(idea.title, idea.description)
            if not result.success:
                return self._service_failed(result, "Enhancement failed", idea)

            updates = {
                "description": result.data["enhancedDescription"],
                # Re-enhancing keeps the very first original
                "original_description": idea.original_description if idea.is_enhanced else idea.description,
            }
            return self._save(
                idea, updates,
                "Description enhanced! ✨", "Your idea description has been enhanced with AI.",
            )

        return self._guarded(idea, "enhance", run)

    def undo_enhancement(self, idea_id: str) -> ActionResult:
        """Restore the pre-enhancement description."""
        check = self._precheck(idea_id)
        if not check.success:
            return check
        idea = check.idea

        if not idea.is_enhanced:
            return ActionResult.failed("Nothing to undo", MISSING_INPUT, idea)

        return self._save(
            idea,
            {"description": idea.original_description, "original_description": None},
            "Enhancement undone", "The original description has been restored.",
        )

    def generate_image(self, idea_id: str) -> ActionResult:
        check = self._precheck(idea_id, self.settings.auto_image_generation, "AI image generation")
        if not check.success:
            return check
        idea = check.idea

        def run() -> ActionResult:
            generator = self.image_generator_factory(self._dev_key("google_ai"))
            result = generator.generate(build_image_prompt(idea))
            if not result.success:
                return self._service_failed(result, "Image generation failed", idea)
            return self._save(
                idea, {"image_url": result.data["imageUrl"]},
                "Image generated! 🎨", "An AI illustration has been added to your idea.",
            )

        return self._guarded(idea, "generate_image", run)

    def capture_screenshot(self, idea_id: str, url: str) -> ActionResult:
        check = self._precheck(idea_id)
        if not check.success:
            return check
        idea = check.idea

        def run() -> ActionResult:
            result = self.screenshot_factory().capture(url)
            if not result.success:
                return self._service_failed(result, "Screenshot failed", idea)
            return self._save(
                idea, {"image_url": result.data["imageUrl"]},
                "Screenshot captured! 📸", "The website screenshot has been added to your idea.",
            )

        return self._guarded(idea, "screenshot", run)

    def upload_image(
        self, idea_id: str, filename: str, data: bytes, content_type: str = "image/png"
    ) -> ActionResult:
        """Store a user-supplied image in the bucket and point the idea at it."""
        check = self._precheck(idea_id)
        if not check.success:
            return check
        idea = check.idea

        if not data:
            return ActionResult.failed("Image file is required", MISSING_INPUT, idea)
        if not (content_type or "").startswith("image/"):
            return ActionResult.failed("Only image files can be uploaded", MISSING_INPUT, idea)

        suffix = PurePosixPath(filename or "").suffix.lower() or ".png"
        object_name = f"{idea.id}-{uuid.uuid4().hex}{suffix}"
        try:
            public_url = self.repository.storage.upload_image(
                self.user_id, object_name, data, content_type
            )
        except StorageError as e:
            logger.error(f"Error uploading image for idea {idea.id}: {e}")
            self.notifier.error("Upload failed", "Failed to upload the image. Please try again.")
            return ActionResult.failed(str(e), STORAGE, idea)

        return self._save(
            idea, {"image_url": public_url},
            "Image uploaded", "The image has been added to your idea.",
        )
