import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import FileResponse, RedirectResponse, Response

from managers.cache_manager import TransientCache
from managers.field_manager import FieldManager
from managers.settings_manager import SettingsManager
from models.errors import InvalidInputError
from thumbnail_processor import STATIC_ROUTE, THUMBNAIL_ROUTE, default_thumbnail_url
from tools.asset import register_asset_tools
from tools.configuration import register_configuration_tools
from tools.field import register_field_tools

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("MCP_Server")

IMAGES_DIR = Path(__file__).parent / "assets" / "images"

settings_manager = SettingsManager()
field_manager = FieldManager.from_config(settings_manager.load_config(), cache=TransientCache())


class AppContext:
    def __init__(self, field_manager: FieldManager):
        self.field_manager = field_manager


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage application lifecycle"""
    logger.info("Starting Canto field MCP server...")
    try:
        if not field_manager.config.is_configured:
            logger.warning(
                "Canto is not configured; lookups will fail until it is: %s",
                "; ".join(field_manager.config.config_errors()),
            )
        yield AppContext(field_manager=field_manager)
    finally:
        field_manager.deactivate()
        logger.info("Shutting down Canto field MCP server")


mcp = FastMCP("Canto_Field_MCP_Server", lifespan=app_lifespan)

register_asset_tools(mcp, field_manager)
register_field_tools(mcp, field_manager)
register_configuration_tools(mcp, field_manager, settings_manager)


@mcp.custom_route(THUMBNAIL_ROUTE, methods=["GET"])
async def canto_thumbnail(request: Request) -> Response:
    """Stream an authenticated Canto preview, or redirect to the default icon"""
    scheme = request.path_params["scheme"]
    asset_id = request.path_params["asset_id"]
    try:
        thumbnail = await run_in_threadpool(field_manager.thumbnail_proxy.get_thumbnail, scheme, asset_id)
    except InvalidInputError as e:
        return Response(e.message, status_code=400)

    if thumbnail is None:
        return RedirectResponse(default_thumbnail_url(field_manager.config.public_url, scheme))
    return Response(
        thumbnail.content,
        media_type=thumbnail.mime_type,
        headers={"Cache-Control": "private, max-age=3600"},
    )


@mcp.custom_route(STATIC_ROUTE, methods=["GET"])
async def default_image(request: Request) -> Response:
    path = IMAGES_DIR / request.path_params["name"]
    if path.parent != IMAGES_DIR or not path.is_file():
        return Response("Not found", status_code=404)
    return FileResponse(path, media_type="image/svg+xml")


if __name__ == "__main__":
    mcp.run(transport="streamable-http")
