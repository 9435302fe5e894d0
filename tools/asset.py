"""Asset lookup tools used by the selection UI and import glue"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from canto_client import DEFAULT_SEARCH_LIMIT
from models.errors import CantoError
from tools.helpers import error_response, format_results, normalize_tree, pagination, result_items

logger = logging.getLogger("MCP_Server")


def register_asset_tools(mcp: FastMCP, field_manager):
    """Register Canto search and lookup tools with the MCP server"""

    canto_client = field_manager.canto_client
    formatter = field_manager.formatter
    resolver = field_manager.resolver

    @mcp.tool()
    def search_assets(
        query: str = "",
        selected_id: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        start: int = 0,
    ) -> dict:
        """Search the Canto library.

        Args:
            query: Keyword matched against filenames (empty lists the newest assets)
            selected_id: Asset already chosen in the field; it is listed first
            limit: Page size (capped at 100)
            start: Offset of the first result

        Returns:
            Lite asset records plus pagination (found, limit, start).
        """
        try:
            payload = canto_client.search(query, limit=limit, start=start)
        except CantoError as e:
            logger.error("Search for %r failed: %s", query, e.reason)
            return error_response(e)

        results = format_results(formatter, payload)

        if selected_id:
            results = [item for item in results if item["id"] != selected_id]
            try:
                selected = resolver.get_asset(selected_id)
            except CantoError as e:
                logger.warning("Selected asset %s could not be loaded: %s", selected_id, e.reason)
                selected = None
            if selected:
                results.insert(0, selected.to_lite())

        return {"results": results, **pagination(payload, limit, start)}

    @mcp.tool()
    def get_asset(asset_id: str) -> dict:
        """Load one asset by its Canto ID and return the full asset record."""
        try:
            record = resolver.get_asset(asset_id)
        except CantoError as e:
            return error_response(e)
        if record is None:
            return {"error": f"Asset not found: {asset_id}", "reason": "asset_not_found"}
        return record.to_dict()

    @mcp.tool()
    def get_tree(album_id: Optional[str] = None) -> dict:
        """List folders and albums, from the root or below ``album_id``."""
        try:
            payload = canto_client.get_tree(album_id)
        except CantoError as e:
            return error_response(e)
        tree = normalize_tree(result_items(payload))
        return {"tree": tree, "count": len(tree), "album_id": album_id}

    @mcp.tool()
    def get_album_assets(album_id: str, limit: int = DEFAULT_SEARCH_LIMIT, start: int = 0) -> dict:
        """List the assets inside one album."""
        try:
            payload = canto_client.get_album(album_id, limit=limit, start=start)
        except CantoError as e:
            return error_response(e)
        results = format_results(formatter, payload)
        return {"results": results, "album_id": album_id, **pagination(payload, limit, start)}

    @mcp.tool()
    def resolve_asset(identifier: str) -> dict:
        """Resolve a stored field value (URL, asset ID or filename) to an asset record."""
        record = resolver.resolve(identifier)
        if record is None:
            return {"found": False, "identifier": identifier}
        return {"found": True, "identifier": identifier, "asset": record.to_dict()}
