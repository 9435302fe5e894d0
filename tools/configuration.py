"""Configuration tools for the Canto field MCP server"""

from typing import Optional

from mcp.server.fastmcp import FastMCP


def register_configuration_tools(mcp: FastMCP, field_manager, settings_manager):
    """Register configuration tools with the MCP server"""

    @mcp.tool()
    def get_configuration_status() -> dict:
        """Report whether the Canto domain and API token are configured.

        The token itself is never returned.
        """
        return field_manager.configuration_status()

    @mcp.tool()
    def configure_canto(
        domain: Optional[str] = None,
        token: Optional[str] = None,
        api_domain: Optional[str] = None,
        persist: bool = False,
    ) -> dict:
        """Set the Canto account domain and API token.

        Args:
            domain: Account subdomain (e.g. "acme" for acme.canto.com)
            token: API bearer token
            api_domain: Canto API host suffix (default "canto.com")
            persist: If True, write the settings to ~/.config/canto-field/config.json.
                Otherwise the change lasts until the server restarts.
        """
        overrides = {
            key: value
            for key, value in {"domain": domain, "token": token, "api_domain": api_domain}.items()
            if value is not None
        }
        if not overrides:
            return {"success": False, "errors": ["No settings provided"]}

        if persist:
            result = settings_manager.persist_settings(overrides)
            if "error" in result:
                return {"success": False, "errors": [result["error"]]}

        current = {
            "domain": field_manager.config.domain,
            "token": field_manager.config.token,
            "api_domain": field_manager.config.api_domain,
            "timeout": field_manager.config.timeout,
            "public_url": field_manager.config.public_url,
        }
        current.update(overrides)
        field_manager.reconfigure(settings_manager.load_config(current))
        return {"success": True, **field_manager.configuration_status()}
