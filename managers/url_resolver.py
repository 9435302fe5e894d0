"""Asset id extraction from the URL shapes Canto has handed out over time"""

import logging
import re
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger("AssetResolver")

# Tunable: shortest final path segment accepted as an id by the generic document pattern
GENERIC_DOCUMENT_ID_MIN_LENGTH = 15

_ID = r"[A-Za-z0-9_-]+"

DIRECT_TOKEN_URL_REGEX = re.compile(rf"/direct/document/({_ID})/[^/?#]+/original")
DIRECT_URL_REGEX = re.compile(rf"/direct/document/({_ID})")
API_BINARY_URL_REGEX = re.compile(rf"/api_binary/v1/(?:advance/)?(?:image|video|document)/({_ID})")
GENERIC_DOCUMENT_URL_REGEX = re.compile(
    rf"/document/([A-Za-z0-9_-]{{{GENERIC_DOCUMENT_ID_MIN_LENGTH},}})"
)


def _match(regex: re.Pattern, url: str) -> Optional[str]:
    match = regex.search(url)
    return match.group(1) if match else None


def match_direct_token_url(url: str) -> Optional[str]:
    """``.../direct/document/<ID>/<TOKEN>/original``"""
    return _match(DIRECT_TOKEN_URL_REGEX, url)


def match_direct_url(url: str) -> Optional[str]:
    """``.../direct/document/<ID>``"""
    return _match(DIRECT_URL_REGEX, url)


def match_api_binary_url(url: str) -> Optional[str]:
    """``.../api_binary/v1/[advance/]<scheme>/<ID>``"""
    return _match(API_BINARY_URL_REGEX, url)


def match_generic_document_url(url: str) -> Optional[str]:
    return _match(GENERIC_DOCUMENT_URL_REGEX, url)


URL_PATTERNS: Sequence[Tuple[str, Callable[[str], Optional[str]]]] = (
    ("direct_token", match_direct_token_url),
    ("direct", match_direct_url),
    ("api_binary", match_api_binary_url),
    ("generic_document", match_generic_document_url),
)

DIRECT_PATTERN_NAMES = frozenset({"direct_token", "direct"})


def match_url(url: str) -> Optional[Tuple[str, str]]:
    """Return ``(pattern_name, asset_id)`` for the first pattern that matches"""
    if not url:
        return None
    for name, matcher in URL_PATTERNS:
        asset_id = matcher(url)
        if asset_id:
            logger.debug("Extracted asset ID %s from %s URL", asset_id, name)
            return name, asset_id
    logger.debug("Could not extract asset ID from URL: %s", url)
    return None


def extract_asset_id(url: str) -> Optional[str]:
    matched = match_url(url)
    return matched[1] if matched else None
