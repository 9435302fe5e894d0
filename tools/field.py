"""Host field tools: render, save and output Canto field values"""

from typing import List

from mcp.server.fastmcp import FastMCP

from managers.field_manager import RETURN_FORMATS


def register_field_tools(mcp: FastMCP, field_manager):
    """Register the host form-field boundary with the MCP server"""

    @mcp.tool()
    def render_field(value: str = "") -> dict:
        """Displayable state of a field: the asset, a placeholder, or a configuration message."""
        return field_manager.render_field(value)

    @mcp.tool()
    def format_for_storage(value: str = "") -> dict:
        """Normalise a selected value into the string stored for the field."""
        return {"value": field_manager.format_for_storage(value)}

    @mcp.tool()
    def format_for_output(value: str, return_format: str = "object") -> dict:
        """Format a stored value for templates.

        Args:
            value: The stored field value
            return_format: "object", "id", "url" or "download_url"
        """
        if return_format not in RETURN_FORMATS:
            return {"error": f"Invalid return_format: {return_format}", "reason": "invalid_input"}
        result = field_manager.format_for_output(value, return_format)
        if result is False:
            return {"value": False}
        if return_format == "object":
            return {"value": result.to_dict()}
        return {"value": result}

    @mcp.tool()
    def validate_value(value: str = "", required: bool = False) -> dict:
        """Check a submitted value; returns the message to show when invalid."""
        result = field_manager.validate_value(value, required)
        if result is True:
            return {"valid": True}
        return {"valid": False, "message": result}

    @mcp.tool()
    def resolve_many(values: List[str]) -> dict:
        """Resolve a batch of stored values (bulk import); failures are reported per item."""
        records = field_manager.resolve_many(values)
        items = [
            {"value": value, "found": record is not None, "asset": record.to_dict() if record else None}
            for value, record in zip(values, records)
        ]
        return {
            "items": items,
            "resolved": sum(1 for item in items if item["found"]),
            "count": len(items),
        }

    @mcp.tool()
    def clear_cache() -> dict:
        """Remove every cached Canto response."""
        return {"success": True, "cleared": field_manager.clear_cache()}
