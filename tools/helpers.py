"""Shared helper functions for tool implementations"""

import logging
from typing import Any, Dict, List

from models.errors import CantoError, NotConfiguredError

logger = logging.getLogger("MCP_Server")

TREE_TYPES = ("folder", "album")


def error_response(exc: CantoError) -> Dict[str, Any]:
    """Tool-facing failure: reason code and message, never the upstream body"""
    response: Dict[str, Any] = {"error": exc.message, "reason": exc.reason}
    if isinstance(exc, NotConfiguredError):
        response["errors"] = exc.errors
    return response


def result_items(payload: Any) -> List[Any]:
    if isinstance(payload, dict):
        payload = payload.get("results")
    return payload if isinstance(payload, list) else []


def format_results(formatter, payload: Any) -> List[Dict[str, Any]]:
    """Format raw search/album items into lite records, dropping invalid ones"""
    results = []
    for item in result_items(payload):
        record = formatter.format_from_search(item)
        if record:
            results.append(record.to_lite())
    return results


def normalize_tree(nodes: Any) -> List[Dict[str, Any]]:
    """Reduce upstream tree nodes to ``{id, name, type, children?}``"""
    tree = []
    for node in nodes or []:
        if not isinstance(node, dict) or not node.get("id"):
            continue
        item: Dict[str, Any] = {
            "id": str(node["id"]),
            "name": node.get("name") or "Untitled",
            "type": node.get("scheme") if node.get("scheme") in TREE_TYPES else "folder",
        }
        children = node.get("children")
        if isinstance(children, list) and children:
            item["children"] = normalize_tree(children)
        tree.append(item)
    return tree


def pagination(payload: Any, fallback_limit: int, fallback_start: int) -> Dict[str, Any]:
    payload = payload if isinstance(payload, dict) else {}
    return {
        "found": payload.get("found", 0),
        "limit": payload.get("limit", fallback_limit),
        "start": payload.get("start", fallback_start),
    }
