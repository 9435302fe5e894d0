"""Normalise Canto search results and get-by-id payloads into AssetRecords"""

import logging
import math
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
from urllib.parse import quote

from managers.url_resolver import match_direct_url
from models.asset import SCHEMES, UNTITLED, AssetRecord
from models.config import CantoConfig
from thumbnail_processor import build_proxy_url, default_thumbnail_url

logger = logging.getLogger("AssetFormatter")

FILENAME_FIELDS = ("Filename", "File Name", "Original Filename", "filename", "file_name")
DIMENSION_FIELDS = ("Dimensions", "Size", "Resolution")
MIME_FIELDS = ("Content Type", "MIME Type", "Type")
EXTENSION_MAP = {"image": "jpg", "video": "mp4", "document": "pdf"}

FILE_EXTENSION_REGEX = re.compile(r"\.[A-Za-z0-9]{2,5}$")
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

Payload = Mapping[str, Any]
Extractor = Callable[[Payload, Dict[str, Any]], str]


def first_non_empty(extractors: Sequence[Extractor], data: Payload, context: Dict[str, Any]) -> str:
    for extractor in extractors:
        value = extractor(data, context)
        if value:
            return value
    return ""


def _metadata(data: Payload) -> Mapping[str, Any]:
    default = data.get("default")
    return default if isinstance(default, Mapping) else {}


def _url_data(data: Payload) -> Mapping[str, Any]:
    urls = data.get("url")
    return urls if isinstance(urls, Mapping) else {}


def _first_field(metadata: Mapping[str, Any], fields: Sequence[str]) -> str:
    for name in fields:
        value = metadata.get(name)
        if value:
            return str(value)
    return ""


def format_size(value: Any) -> str:
    """Human readable byte size ("2.5 MB"); empty for anything non-numeric"""
    if isinstance(value, bool):
        return ""
    try:
        size = float(value)
    except (TypeError, ValueError):
        return ""
    if size < 0 or not math.isfinite(size):
        return ""

    unit_index = 0
    while round(size, 1) >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1

    text = f"{size:.1f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit_index]}"


# Scheme inference

def scheme_from_field(data: Payload, context: Dict[str, Any]) -> str:
    scheme = data.get("scheme")
    return scheme if scheme in SCHEMES else ""


def scheme_from_preview_url(data: Payload, context: Dict[str, Any]) -> str:
    preview = str(_url_data(data).get("preview") or "")
    if "/video/" in preview:
        return "video"
    if "/document/" in preview:
        return "document"
    return ""


def scheme_from_mime_type(data: Payload, context: Dict[str, Any]) -> str:
    mime_type = str(_metadata(data).get("Content Type") or "").lower()
    if mime_type.startswith("video/"):
        return "video"
    if mime_type.startswith(("application/", "text/")):
        return "document"
    return ""


def default_scheme(data: Payload, context: Dict[str, Any]) -> str:
    return "image"


SCHEME_EXTRACTORS: Sequence[Extractor] = (
    scheme_from_field,
    scheme_from_preview_url,
    scheme_from_mime_type,
    default_scheme,
)


# Filename derivation

def filename_from_metadata(data: Payload, context: Dict[str, Any]) -> str:
    return _first_field(_metadata(data), FILENAME_FIELDS)


def filename_from_name(data: Payload, context: Dict[str, Any]) -> str:
    name = context["name"]
    return name if FILE_EXTENSION_REGEX.search(name) else ""


def synthesized_filename(data: Payload, context: Dict[str, Any]) -> str:
    extension = EXTENSION_MAP.get(context["scheme"], "bin")
    safe_name = UNSAFE_FILENAME_CHARS.sub("_", context["name"])
    return f"{safe_name}.{extension}"


FILENAME_EXTRACTORS: Sequence[Extractor] = (
    filename_from_metadata,
    filename_from_name,
    synthesized_filename,
)


# Preview URL

def preview_from_direct(data: Payload, context: Dict[str, Any]) -> str:
    return str(_url_data(data).get("directUrlPreview") or "")


def preview_from_legacy(data: Payload, context: Dict[str, Any]) -> str:
    return str(_url_data(data).get("preview") or "")


PREVIEW_EXTRACTORS: Sequence[Extractor] = (preview_from_direct, preview_from_legacy)


# Thumbnail. The legacy preview needs an auth header, so it never becomes the thumbnail.

def thumbnail_from_proxy(data: Payload, context: Dict[str, Any]) -> str:
    config: CantoConfig = context["config"]
    if not config.is_configured:
        return ""
    return build_proxy_url(config.public_url, context["scheme"], context["id"])


def thumbnail_from_default(data: Payload, context: Dict[str, Any]) -> str:
    return default_thumbnail_url(context["config"].public_url, context["scheme"])


THUMBNAIL_EXTRACTORS: Sequence[Extractor] = (
    preview_from_direct,
    thumbnail_from_proxy,
    thumbnail_from_default,
)


# Download URL

def download_from_direct_original(data: Payload, context: Dict[str, Any]) -> str:
    return str(_url_data(data).get("directUrlOriginal") or "")


def download_from_legacy(data: Payload, context: Dict[str, Any]) -> str:
    return str(_url_data(data).get("download") or "")


def download_from_direct_document(data: Payload, context: Dict[str, Any]) -> str:
    """Skipped for ids the direct URL pattern cannot read back"""
    config: CantoConfig = context["config"]
    if not config.domain:
        return ""
    url = f"{config.site_base_url}direct/document/{context['id']}"
    return url if match_direct_url(url) == context["id"] else ""


def download_from_api_binary(data: Payload, context: Dict[str, Any]) -> str:
    config: CantoConfig = context["config"]
    if not config.domain:
        return ""
    scheme = context["scheme"]
    asset_id = quote(context["id"], safe="")
    if scheme == "image":
        return f"{config.binary_base_url}advance/image/{asset_id}/download/directuri?type=jpg&dpi=72"
    if scheme in ("video", "document"):
        return f"{config.binary_base_url}{scheme}/{asset_id}/download"
    return ""


DOWNLOAD_EXTRACTORS: Sequence[Extractor] = (
    download_from_direct_original,
    download_from_legacy,
    download_from_direct_document,
    download_from_api_binary,
)


def is_valid_asset_data(data: Any) -> bool:
    return isinstance(data, Mapping) and bool(data.get("id"))


class AssetFormatter:
    """Both upstream payload shapes funnel through ``_build`` so they converge on one record"""

    def __init__(self, config: CantoConfig):
        self.config = config

    def format_from_search(self, raw_item: Any) -> Optional[AssetRecord]:
        if not is_valid_asset_data(raw_item):
            logger.warning("Invalid asset data provided for formatting: %r", raw_item)
            return None
        return self._build(raw_item, str(raw_item["id"]))

    def format_from_get_by_id(self, raw_payload: Any, asset_id: str) -> Optional[AssetRecord]:
        if not is_valid_asset_data(raw_payload):
            logger.warning("Invalid asset data provided for formatting asset %s: %r", asset_id, raw_payload)
            return None
        return self._build(raw_payload, str(asset_id or raw_payload["id"]))

    def _build(self, data: Payload, asset_id: str) -> AssetRecord:
        context: Dict[str, Any] = {"id": asset_id, "config": self.config}
        context["scheme"] = first_non_empty(SCHEME_EXTRACTORS, data, context)
        context["name"] = str(data.get("name") or UNTITLED)

        metadata = dict(_metadata(data))
        return AssetRecord(
            id=asset_id,
            scheme=context["scheme"],
            name=context["name"],
            filename=first_non_empty(FILENAME_EXTRACTORS, data, context),
            url=first_non_empty(PREVIEW_EXTRACTORS, data, context),
            thumbnail=first_non_empty(THUMBNAIL_EXTRACTORS, data, context),
            download_url=first_non_empty(DOWNLOAD_EXTRACTORS, data, context),
            dimensions=_first_field(metadata, DIMENSION_FIELDS),
            mime_type=_first_field(metadata, MIME_FIELDS),
            size=format_size(data.get("size")),
            uploaded=str(data.get("lastUploaded") or ""),
            metadata=metadata,
        )
