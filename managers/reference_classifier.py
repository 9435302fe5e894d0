"""Classify stored field values before any lookup happens"""

import json
import re
from urllib.parse import urlparse

from managers.url_resolver import DIRECT_PATTERN_NAMES, match_url
from models.reference import ReferenceKind, StoredReference

# Tunable: a bare id must be strictly longer than this
BARE_ID_MIN_EXCLUSIVE_LENGTH = 10

TEST_TOKEN_REGEX = re.compile(r"^CANTO_([^_]+)_")
BARE_ID_REGEX = re.compile(r"^[A-Za-z0-9_-]+$")


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_bare_id(value: str) -> bool:
    return bool(BARE_ID_REGEX.match(value)) and len(value) > BARE_ID_MIN_EXCLUSIVE_LENGTH


def _unwrap_legacy_json(value: str) -> str:
    """Older releases stored ``{"filename": ...}`` blobs; keep only the filename"""
    if not value.startswith("{"):
        return value
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return value
    if isinstance(decoded, dict) and decoded.get("filename"):
        return str(decoded["filename"])
    return value


def classify_reference(raw) -> StoredReference:
    if raw is None:
        return StoredReference(raw="", kind=ReferenceKind.EMPTY)

    raw = str(raw)
    value = raw.strip()
    if not value:
        return StoredReference(raw=raw, kind=ReferenceKind.EMPTY)

    token = TEST_TOKEN_REGEX.match(value)
    if token:
        return StoredReference(raw=raw, kind=ReferenceKind.TEST_TOKEN, value=value, asset_id=token.group(1))

    # Known Canto paths count even without a scheme or host
    matched = match_url(value)
    if matched:
        pattern_name, asset_id = matched
        kind = ReferenceKind.DIRECT_URL if pattern_name in DIRECT_PATTERN_NAMES else ReferenceKind.LEGACY_URL
        return StoredReference(raw=raw, kind=kind, value=value, asset_id=asset_id)

    if is_url(value):
        return StoredReference(raw=raw, kind=ReferenceKind.LEGACY_URL, value=value)

    if is_bare_id(value):
        return StoredReference(raw=raw, kind=ReferenceKind.BARE_ID, value=value, asset_id=value)

    return StoredReference(raw=raw, kind=ReferenceKind.LEGACY_FILENAME, value=_unwrap_legacy_json(value))
