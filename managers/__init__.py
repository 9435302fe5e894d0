"""Manager classes for the Canto field MCP server"""

from managers.asset_formatter import AssetFormatter
from managers.cache_manager import TransientCache
from managers.settings_manager import SettingsManager

__all__ = ["AssetFormatter", "SettingsManager", "TransientCache"]
