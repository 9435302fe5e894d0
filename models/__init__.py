"""Data models for the Canto field MCP server"""

from models.asset import SCHEMES, AssetRecord
from models.config import CantoConfig
from models.reference import ReferenceKind, StoredReference

__all__ = ["SCHEMES", "AssetRecord", "CantoConfig", "ReferenceKind", "StoredReference"]
