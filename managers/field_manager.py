"""Host form-field boundary: render, store and output Canto field values"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from canto_client import CantoClient
from managers.asset_formatter import AssetFormatter
from managers.asset_resolver import AssetResolver
from managers.reference_classifier import is_url
from models.asset import AssetRecord
from models.config import CantoConfig
from thumbnail_processor import ThumbnailProxy

logger = logging.getLogger("CantoField")

MAX_STORED_LENGTH = 2000
RETURN_FORMATS = ("object", "id", "url", "download_url")

NOT_CONFIGURED_MESSAGE = "Canto plugin is not configured or not available."
NOT_FOUND_MESSAGE = "This asset could not be found. It may have been removed from Canto."
SELECT_PROMPT = "Select Canto Asset"
REQUIRED_MESSAGE = "This field is required."


class FieldManager:
    """What the host field framework calls: render, save, format for output"""

    def __init__(
        self,
        canto_client: CantoClient,
        formatter: AssetFormatter,
        resolver: AssetResolver,
        thumbnail_proxy: Optional[ThumbnailProxy] = None,
    ):
        self.canto_client = canto_client
        self.formatter = formatter
        self.resolver = resolver
        self.thumbnail_proxy = thumbnail_proxy or ThumbnailProxy(canto_client)

    @classmethod
    def from_config(cls, config: CantoConfig, cache=None, session=None) -> "FieldManager":
        canto_client = CantoClient(config, cache=cache, session=session)
        formatter = AssetFormatter(config)
        return cls(canto_client, formatter, AssetResolver(canto_client, formatter))

    @property
    def config(self) -> CantoConfig:
        return self.canto_client.config

    def reconfigure(self, config: CantoConfig):
        """Swap in new settings; cached entries were built with the old ones and are dropped"""
        self.canto_client.config = config
        self.formatter.config = config
        self.clear_cache()
        logger.info("Canto configuration updated (configured=%s)", config.is_configured)

    def configuration_status(self) -> Dict[str, Any]:
        return {
            "configured": self.config.is_configured,
            "errors": self.config.config_errors(),
            "domain": self.config.domain,
            "api_domain": self.config.api_domain,
        }

    def render_field(self, stored_value: Any) -> Dict[str, Any]:
        """Displayable state for the field: configuration error, asset, or placeholder"""
        if not self.config.is_configured:
            return {
                "status": "not_configured",
                "message": NOT_CONFIGURED_MESSAGE,
                "errors": self.config.config_errors(),
            }

        value = "" if stored_value is None else str(stored_value)
        if not value.strip():
            return {"status": "empty", "value": "", "message": SELECT_PROMPT}

        record = self.resolver.resolve(value)
        if record is None:
            return {"status": "not_found", "value": value, "message": NOT_FOUND_MESSAGE}
        return {"status": "asset", "value": value, "asset": record.to_dict()}

    def format_for_storage(self, value: Any) -> str:
        """Normalise user input into the single string persisted for the field"""
        if not value or not isinstance(value, str):
            return ""

        value = value.strip()
        if is_url(value):
            if len(value) > MAX_STORED_LENGTH:
                logger.warning(
                    "URL too long for storage (%d > %d): %s...",
                    len(value),
                    MAX_STORED_LENGTH,
                    value[:100],
                )
                return value[:MAX_STORED_LENGTH]
            return value

        if value:
            logger.info("Saving non-URL value (legacy or test format): %s", value)
        return value

    def format_for_output(
        self, stored_value: Any, return_format: str = "object"
    ) -> Union[AssetRecord, str, bool]:
        if not stored_value:
            return False

        record = self.resolver.resolve(stored_value)
        if record is None:
            logger.warning("Asset data not found for field value %r", stored_value)
            return False

        if return_format == "id":
            return record.id or False
        if return_format == "url":
            return record.url or False
        if return_format == "download_url":
            return record.download_url or False
        return record

    def validate_value(self, value: Any, required: bool = False) -> Union[bool, str]:
        if required and not value:
            return REQUIRED_MESSAGE
        return True

    def resolve_many(self, values: Iterable[Any]) -> List[Optional[AssetRecord]]:
        return self.resolver.resolve_many(values)

    def clear_cache(self) -> int:
        """Drop cached API responses and previews; returns how many entries went"""
        return self.canto_client.clear_cache() + self.thumbnail_proxy.clear()

    def deactivate(self) -> int:
        """Plugin deactivation: drop every namespaced cache entry"""
        cleared = self.clear_cache()
        logger.info("Canto field deactivated; removed %d cache entries", cleared)
        return cleared
