"""Thumbnail proxy: locally routable previews for assets without a direct URL"""

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, Optional

from PIL import Image, ImageOps

from models.asset import SCHEMES
from models.errors import CantoError, InvalidInputError

logger = logging.getLogger("ThumbnailProxy")

THUMBNAIL_ROUTE = "/canto-thumbnail/{scheme}/{asset_id}"
STATIC_ROUTE = "/static/images/{name}"
ASSET_ID_REGEX = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_MAX_DIM = 512
DEFAULT_QUALITY = 75
PREVIEW_CACHE_LIMIT = 100


def build_proxy_url(public_url: str, scheme: str, asset_id: str) -> str:
    """URL on this server that streams the authenticated upstream preview"""
    path = THUMBNAIL_ROUTE.format(scheme=scheme, asset_id=asset_id)
    return public_url.rstrip("/") + path


def default_thumbnail_url(public_url: str, scheme: str) -> str:
    if scheme not in SCHEMES:
        scheme = "image"
    path = STATIC_ROUTE.format(name=f"default-{scheme}.svg")
    return public_url.rstrip("/") + path


def create_thumbnail(
    image_bytes: bytes,
    max_dim: int = DEFAULT_MAX_DIM,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """Downscale to ``max_dim`` on the long side and re-encode as JPEG"""
    with Image.open(BytesIO(image_bytes)) as loaded:
        img = ImageOps.exif_transpose(loaded)
        if img.mode in ("RGBA", "LA", "P"):
            # Flatten transparency onto white
            if img.mode == "P":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")

        width, height = img.size
        if width > max_dim or height > max_dim:
            if width > height:
                new_size = (max_dim, max(1, int(height * (max_dim / width))))
            else:
                new_size = (max(1, int(width * (max_dim / height))), max_dim)
            img = img.resize(new_size, Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=quality, optimize=True)
        return output.getvalue()


@dataclass(frozen=True)
class Thumbnail:
    content: bytes
    mime_type: str = "image/jpeg"


class ThumbnailProxy:
    """Fetches previews through the authenticated binary API for the proxy route"""

    def __init__(self, canto_client, max_dim: int = DEFAULT_MAX_DIM, quality: int = DEFAULT_QUALITY):
        self.canto_client = canto_client
        self.max_dim = max_dim
        self.quality = quality
        self._cache: Dict[str, Thumbnail] = {}

    def get_thumbnail(self, scheme: str, asset_id: str) -> Optional[Thumbnail]:
        """Return the processed preview, or None when it cannot be produced"""
        if scheme not in SCHEMES or not ASSET_ID_REGEX.match(asset_id or ""):
            raise InvalidInputError(f"Invalid thumbnail request: {scheme}/{asset_id}")

        cache_key = f"{scheme}:{asset_id}:{self.max_dim}:{self.quality}"
        cached = self._cache.get(cache_key)
        if cached:
            return cached

        try:
            raw = self.canto_client.fetch_binary(f"{scheme}/{asset_id}/preview")
        except CantoError as e:
            logger.warning("Preview fetch failed for %s/%s: %s", scheme, asset_id, e.reason)
            return None

        try:
            thumbnail = Thumbnail(create_thumbnail(raw, self.max_dim, self.quality))
        except (OSError, ValueError) as e:
            # Not an image Pillow can read (e.g. a PDF preview); pass it through untouched
            logger.warning(f"Failed to create thumbnail for {scheme}/{asset_id}: {e}")
            thumbnail = Thumbnail(raw, "application/octet-stream")

        if len(self._cache) >= PREVIEW_CACHE_LIMIT:
            self._cache.pop(next(iter(self._cache)))
        self._cache[cache_key] = thumbnail
        return thumbnail

    def clear(self) -> int:
        cleared = len(self._cache)
        self._cache.clear()
        logger.info("Cleared %d cached previews", cleared)
        return cleared
