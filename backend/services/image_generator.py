"""
Image generation via the public Pollinations endpoint

Each request returns raw image bytes; they are handed back as a base64
data URL so the upload step can store them later.
"""
import base64
import logging
import time
from typing import Optional, Tuple
from urllib.parse import quote

import httpx

from config import get_settings
from services.errors import ImageGenerationError

logger = logging.getLogger(__name__)


SCHEMATIC_STYLE = (
    "detailed electronic circuit schematic, black and white, technical drawing, "
    "clean lines, component labels, professional diagram, high resolution"
)
PHOTO_STYLE = "photorealistic, 8k, detailed, professional photography, cinematic lighting"
NEGATIVE_PROMPT = (
    "blurry, ugly, cartoon, drawing, sketch, deformed, watermark, text, logo, "
    "3d render, illustration"
)


def build_prompts(prompt: str, schematic: bool) -> Tuple[str, str]:
    """Return (enhanced prompt, negative prompt)"""
    style = SCHEMATIC_STYLE if schematic else PHOTO_STYLE
    return f"{prompt}, {style}", NEGATIVE_PROMPT


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ImageGenerator:
    """Requests one rendered image per prompt"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.image_api_base_url).rstrip("/")
        self.width = width or settings.image_width
        self.height = height or settings.image_height
        self.timeout = timeout if timeout is not None else settings.image_timeout_seconds
        self._client = client

    def _seed(self) -> int:
        # Millisecond seed keeps the endpoint from serving a cached image
        return int(time.time() * 1000)

    def build_request(self, prompt: str, schematic: bool) -> Tuple[str, dict]:
        enhanced, negative = build_prompts(prompt, schematic)
        url = f"{self.base_url}/prompt/{quote(enhanced, safe='')}"
        params = {
            "width": self.width,
            "height": self.height,
            "seed": self._seed(),
            "nologo": "true",
            "negative_prompt": negative,
        }
        return url, params

    async def generate(self, prompt: str, schematic: Optional[bool] = None) -> str:
        """
        Generate an image and return it as a data URL.

        Args:
            prompt: Text prompt
            schematic: Use the circuit-schematic style; defaults to whether
                the prompt mentions a schematic

        Raises:
            ImageGenerationError: endpoint answered with a non-2xx status
            httpx.HTTPError: transport failures, unchanged
        """
        if schematic is None:
            schematic = "schematic" in prompt.lower()

        url, params = self.build_request(prompt, schematic)

        if self._client is not None:
            response = await self._client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url, params=params)

        if not response.is_success:
            logger.error(f"Image generation failed: {response.status_code} {response.reason_phrase}")
            raise ImageGenerationError(response.status_code, response.reason_phrase)

        content_type = response.headers.get("content-type", "image/png").split(";")[0].strip()
        if not content_type.startswith("image/"):
            content_type = "image/png"
        logger.info(f"Generated image ({len(response.content)} bytes, {content_type})")
        return to_data_url(response.content, content_type)
