"""Asset data models"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict

SCHEMES = ("image", "video", "document")
UNTITLED = "Untitled"


@dataclass(frozen=True)
class AssetRecord:
    """Canonical, display-ready projection of a Canto asset.

    Unknown descriptive values are empty strings, never None, so the record
    serializes the same way whatever the upstream payload looked like.
    """
    id: str
    scheme: str
    name: str
    filename: str
    url: str
    thumbnail: str
    download_url: str
    dimensions: str = ""
    mime_type: str = ""
    size: str = ""
    uploaded: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_lite(self) -> Dict[str, Any]:
        """Subset used by the selection UI grids"""
        return {
            "id": self.id,
            "scheme": self.scheme,
            "name": self.name,
            "filename": self.filename,
            "thumbnail": self.thumbnail,
            "download_url": self.download_url,
            "dimensions": self.dimensions,
            "size": self.size,
        }
