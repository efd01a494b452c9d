"""
Screenshot evidence captured after every step.
"""

import base64
import io
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from testpilot.config.settings import Settings, get_settings
from testpilot.core.interfaces import BrowserSession
from testpilot.monitoring.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER_HEIGHT = 400


@dataclass(frozen=True)
class Evidence:
    """Screenshot payload attached to an execution result."""

    data_url: str
    width: Optional[int]
    height: Optional[int]
    ai_hint: Optional[str] = None
    error: Optional[str] = None


def image_size(png_bytes: bytes) -> Tuple[Optional[int], Optional[int]]:
    """Read image dimensions, or (None, None) if the bytes are not an image."""
    try:
        with Image.open(io.BytesIO(png_bytes)) as image:
            return image.size
    except (UnidentifiedImageError, OSError):
        return None, None


class EvidenceCollector:
    """Captures screenshots and substitutes placeholders when capture fails."""

    def __init__(
        self,
        session: Optional[BrowserSession],
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self._rng = rng or random.Random()

    async def capture(self) -> Evidence:
        """
        Capture the current page.

        Capture failures never propagate: they produce a placeholder image
        reference with the failure reason kept as metadata.
        """
        try:
            png_bytes = await self.session.screenshot()
        except Exception as e:
            logger.warning("Failed to take screenshot for step", extra={"error": str(e)})
            height = self._rng.randint(300, 499)
            return self.placeholder(height=height, hint="error screenshot", error=str(e))

        width, height = image_size(png_bytes)
        encoded = base64.b64encode(png_bytes).decode("utf-8")
        return Evidence(
            data_url=f"data:image/png;base64,{encoded}",
            width=width,
            height=height,
        )

    def placeholder(
        self,
        height: int = PLACEHOLDER_HEIGHT,
        hint: str = "error",
        error: Optional[str] = None,
    ) -> Evidence:
        """Placeholder image reference used when no real screenshot exists."""
        width = self.settings.placeholder_width
        base_url = self.settings.placeholder_image_url.rstrip("/")
        return Evidence(
            data_url=f"{base_url}/{width}x{height}.png",
            width=width,
            height=height,
            ai_hint=hint,
            error=error,
        )
