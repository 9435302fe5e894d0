import json
import logging
from typing import Any, Dict, Iterable, Optional

import requests

from managers.cache_manager import (
    ALBUM_NAMESPACE,
    TREE_NAMESPACE,
    TransientCache,
    asset_cache_key,
    make_cache_key,
    search_cache_key,
)
from models.asset import SCHEMES
from models.config import CantoConfig
from models.errors import (
    AssetNotFoundError,
    CantoError,
    EmptyResponseError,
    InvalidInputError,
    InvalidJsonError,
    NotConfiguredError,
    TransportError,
    UpstreamHttpError,
    UpstreamReportedError,
)

logger = logging.getLogger("CantoClient")

USER_AGENT = "Canto Field MCP Server"
DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 100

FILETYPE_IMAGES = "GIF|JPG|PNG|SVG|WEBP"
FILETYPE_DOCUMENTS = "DOC|KEY|ODT|PDF|PPT|XLS"
FILETYPE_AUDIO = "MPEG|M4A|OGG|WAV"
FILETYPE_VIDEO = "AVI|MP4|MOV|OGG|VTT|WMV|3GP"
ALL_FILE_TYPES = "|".join((FILETYPE_IMAGES, FILETYPE_DOCUMENTS, FILETYPE_AUDIO, FILETYPE_VIDEO))

DEFAULT_SEARCH_OPTIONS = {
    "limit": DEFAULT_SEARCH_LIMIT,
    "start": 0,
    "file_types": ALL_FILE_TYPES,
    "operator": "and",
    "sort_by": "time",
    "sort_direction": "descending",
    "search_in_field": "filename",
}


class CantoClient:
    """Read-only client for the Canto REST API.

    Every successful response is written through to the transient cache, and
    every failure is raised as one of the ``models.errors`` types.
    """

    def __init__(
        self,
        config: CantoConfig,
        cache: Optional[TransientCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.cache = cache if cache is not None else TransientCache()
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET ``endpoint`` relative to the API base and return the decoded JSON body"""
        url = self.config.api_base_url + endpoint.lstrip("/")
        response = self._get(url, params)
        body = response.text

        if not body or not body.strip():
            logger.error("API returned empty response for %s", url)
            raise EmptyResponseError()

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON response from {url}: {e}")
            raise InvalidJsonError(f"Invalid JSON response: {e}") from e

        if isinstance(data, dict) and "error" in data:
            logger.error("API error from %s: %s", url, data["error"])
            raise UpstreamReportedError(str(data["error"]))

        return data

    def fetch_binary(self, path: str) -> bytes:
        """GET an authenticated binary endpoint (previews, downloads)"""
        url = self.config.binary_base_url + path.lstrip("/")
        response = self._get(url)
        if not response.content:
            logger.error("Binary endpoint returned no content: %s", url)
            raise EmptyResponseError()
        return response.content

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        if not self.config.is_configured:
            raise NotConfiguredError(self.config.config_errors())

        logger.debug("Making API request to: %s", url)
        try:
            response = self.session.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"API request failed: {e}")
            raise TransportError(f"API request failed: {e}") from e

        if response.status_code != 200:
            logger.error("API returned HTTP %s: %s", response.status_code, response.text[:500])
            raise UpstreamHttpError(response.status_code, response.text)
        return response

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json;charset=utf-8",
        }

    def search(self, query: str = "", **options) -> Dict[str, Any]:
        """Search the library; returns the raw payload with ``results`` and pagination"""
        effective = self.effective_search_options(options)

        cache_key = search_cache_key(query, effective)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Using cached search results for: %s", query)
            return cached

        params = {
            "keyword": query,
            "fileType": effective["file_types"],
            "operator": effective["operator"],
            "limit": effective["limit"],
            "start": effective["start"],
            "sortBy": effective["sort_by"],
            "sortDirection": effective["sort_direction"],
            "searchInField": effective["search_in_field"],
        }
        result = self.request("search", params)
        self.cache.set(cache_key, result)
        logger.debug("Cached search results for: %s", query)
        return result

    @staticmethod
    def effective_search_options(options: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(options) - set(DEFAULT_SEARCH_OPTIONS)
        if unknown:
            raise InvalidInputError(f"Unknown search options: {sorted(unknown)}")

        effective = dict(DEFAULT_SEARCH_OPTIONS)
        effective.update({key: value for key, value in options.items() if value is not None})
        effective["limit"] = max(1, min(int(effective["limit"]), MAX_SEARCH_LIMIT))
        effective["start"] = max(0, int(effective["start"]))
        return effective

    def get_asset(self, asset_id: str, scheme: Optional[str] = None) -> Dict[str, Any]:
        """Fetch one asset, probing each per-type endpoint when the scheme is unknown"""
        if not asset_id:
            raise InvalidInputError("Asset ID is required")
        if scheme is not None and scheme not in SCHEMES:
            raise InvalidInputError(f"Unknown asset scheme: {scheme}")

        cache_key = asset_cache_key(asset_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Using cached asset data for: %s", asset_id)
            return cached

        schemes: Iterable[str] = (scheme,) if scheme else SCHEMES
        last_error: Optional[CantoError] = None
        for current_scheme in schemes:
            try:
                result = self.request(f"{current_scheme}/{asset_id}")
            except NotConfiguredError:
                raise
            except CantoError as e:
                logger.debug("No %s asset %s: %s", current_scheme, asset_id, e.reason)
                last_error = e
                continue
            self.cache.set(cache_key, result)
            logger.debug("Cached asset data for: %s", asset_id)
            return result

        logger.warning("Asset not found: %s", asset_id)
        raise AssetNotFoundError(asset_id, last_error)

    def get_tree(self, album_id: Optional[str] = None) -> Dict[str, Any]:
        """Folder/album tree, either from the root or below one folder"""
        endpoint = f"tree/{album_id}" if album_id else "tree"
        params = {"sortBy": "name", "sortDirection": "ascending", "layer": 1}
        return self._cached_request(TREE_NAMESPACE, endpoint, params)

    def get_album(self, album_id: str, limit: int = DEFAULT_SEARCH_LIMIT, start: int = 0) -> Dict[str, Any]:
        if not album_id:
            raise InvalidInputError("Album ID is required")
        params = {
            "limit": max(1, min(int(limit), MAX_SEARCH_LIMIT)),
            "start": max(0, int(start)),
        }
        return self._cached_request(ALBUM_NAMESPACE, f"album/{album_id}", params)

    def _cached_request(self, namespace: str, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        cache_key = make_cache_key(namespace, {"endpoint": endpoint, **params})
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        result = self.request(endpoint, params)
        self.cache.set(cache_key, result)
        return result

    def clear_cache(self) -> int:
        cleared = self.cache.invalidate_all()
        logger.info("Cleared Canto API cache")
        return cleared
