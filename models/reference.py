"""Stored field value classification models"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReferenceKind(str, Enum):
    EMPTY = "empty"
    TEST_TOKEN = "test_token"
    DIRECT_URL = "direct_url"
    LEGACY_URL = "legacy_url"
    BARE_ID = "bare_id"
    LEGACY_FILENAME = "legacy_filename"


@dataclass(frozen=True)
class StoredReference:
    """A persisted field value and what it was recognised as.

    ``asset_id`` is set whenever the id could be read straight off the value
    (test tokens, bare ids and URLs matching a known pattern). ``value`` is the
    trimmed string used for lookups; for legacy JSON values it is the
    unwrapped filename.
    """
    raw: str
    kind: ReferenceKind
    value: str = ""
    asset_id: Optional[str] = None
