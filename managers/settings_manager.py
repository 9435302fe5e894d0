"""Canto connection settings with precedence: overrides > config file > env > hardcoded"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from models.config import DEFAULT_API_DOMAIN, DEFAULT_PUBLIC_URL, DEFAULT_TIMEOUT, CantoConfig

logger = logging.getLogger("MCP_Server")

# Configuration paths
CONFIG_DIR = Path.home() / ".config" / "canto-field"
CONFIG_FILE = CONFIG_DIR / "config.json"

SETTING_KEYS = ("domain", "token", "api_domain", "timeout", "public_url")
ENV_VARS = {
    "domain": "CANTO_DOMAIN",
    "token": "CANTO_TOKEN",
    "api_domain": "CANTO_API_DOMAIN",
    "timeout": "CANTO_TIMEOUT",
    "public_url": "CANTO_PUBLIC_URL",
}


class SettingsManager:
    """Builds the CantoConfig handed to the client; nothing else reads settings"""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or CONFIG_FILE
        self._hardcoded_settings: Dict[str, Any] = {
            "domain": "",
            "token": "",
            "api_domain": DEFAULT_API_DOMAIN,
            "timeout": DEFAULT_TIMEOUT,
            "public_url": DEFAULT_PUBLIC_URL,
        }

    def _load_file_settings(self) -> Dict[str, Any]:
        """Load the ``canto`` section of the config file"""
        if not self.config_file.exists():
            return {}
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config file {self.config_file}: {e}")
            return {}

        section = config.get("canto", {}) if isinstance(config, dict) else {}
        if not isinstance(section, dict):
            return {}
        return {key: value for key, value in section.items() if key in SETTING_KEYS and value not in (None, "")}

    def _get_env_settings(self) -> Dict[str, Any]:
        settings = {}
        for key, env_var in ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                settings[key] = value
        return settings

    def get_settings(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Effective settings merged from every source"""
        settings = dict(self._hardcoded_settings)
        settings.update(self._get_env_settings())
        settings.update(self._load_file_settings())
        settings.update({key: value for key, value in (overrides or {}).items() if value is not None})

        try:
            settings["timeout"] = int(settings["timeout"])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid timeout %r; using %s seconds", settings["timeout"], DEFAULT_TIMEOUT)
            settings["timeout"] = DEFAULT_TIMEOUT
        return settings

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> CantoConfig:
        settings = self.get_settings(overrides)
        config = CantoConfig(
            domain=str(settings["domain"]).strip(),
            token=str(settings["token"]).strip(),
            api_domain=str(settings["api_domain"]).strip() or DEFAULT_API_DOMAIN,
            timeout=settings["timeout"],
            public_url=str(settings["public_url"]).rstrip("/") or DEFAULT_PUBLIC_URL,
        )
        if not config.is_configured:
            logger.warning("Canto is not configured: %s", "; ".join(config.config_errors()))
        return config

    def persist_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``settings`` into the config file"""
        unknown = set(settings) - set(SETTING_KEYS)
        if unknown:
            return {"error": f"Unknown settings: {sorted(unknown)}"}

        config: Dict[str, Any] = {}
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = json.load(f)
            except (json.JSONDecodeError, IOError):
                config = {}
        if not isinstance(config, dict):
            config = {}
        if not isinstance(config.get("canto"), dict):
            config["canto"] = {}
        config["canto"].update(settings)

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            return {"error": f"Failed to write config file: {e}"}

        logger.info(f"Saved Canto settings to {self.config_file}")
        return {"success": True, "persisted": sorted(settings)}
