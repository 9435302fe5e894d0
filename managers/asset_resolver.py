"""Resolve stored field values into AssetRecords"""

import logging
from typing import Iterable, List, Optional

from canto_client import MAX_SEARCH_LIMIT, CantoClient
from managers.asset_formatter import AssetFormatter
from managers.reference_classifier import classify_reference
from models.asset import AssetRecord
from models.errors import CantoError, UpstreamMalformedError
from models.reference import ReferenceKind, StoredReference

logger = logging.getLogger("AssetResolver")


class AssetResolver:
    """Turns any StoredReference into one AssetRecord, or None.

    Holds no state between calls beyond what the client caches. Upstream
    failures are logged with their reason and reported as not found.
    """

    def __init__(self, canto_client: CantoClient, formatter: AssetFormatter):
        self.canto_client = canto_client
        self.formatter = formatter

    def resolve(self, identifier) -> Optional[AssetRecord]:
        reference = classify_reference(identifier)
        try:
            return self._resolve_reference(reference)
        except CantoError as e:
            logger.error(
                "Failed to resolve %s value %r: %s (%s)",
                reference.kind.value,
                reference.value,
                e.message,
                e.reason,
            )
            return None

    def resolve_many(self, identifiers: Iterable) -> List[Optional[AssetRecord]]:
        """Resolve each value on its own; one failure never stops the batch"""
        results = [self.resolve(identifier) for identifier in identifiers]
        found = sum(1 for record in results if record is not None)
        logger.info("Bulk resolution finished: %d of %d values resolved", found, len(results))
        return results

    def _resolve_reference(self, reference: StoredReference) -> Optional[AssetRecord]:
        if reference.kind is ReferenceKind.EMPTY:
            return None

        if reference.asset_id:
            logger.debug("Resolving %s value via asset ID %s", reference.kind.value, reference.asset_id)
            return self.get_asset(reference.asset_id)

        if reference.kind is ReferenceKind.LEGACY_URL:
            return self.find_by_download_url(reference.value)

        return self.find_by_filename(reference.value)

    def get_asset(self, asset_id: str) -> Optional[AssetRecord]:
        """Direct fetch by id; raises CantoError for upstream failures"""
        payload = self.canto_client.get_asset(asset_id)
        return self.formatter.format_from_get_by_id(payload, asset_id)

    def find_by_download_url(self, download_url: str) -> Optional[AssetRecord]:
        """Scan a full search for a record whose download URL is exactly ``download_url``"""
        logger.info("No asset ID in URL, scanning search results for %s", download_url)
        result = self.canto_client.search("", limit=MAX_SEARCH_LIMIT)
        for record in self._format_results(result):
            if record.download_url == download_url:
                return record

        logger.warning("No asset matches download URL %s", download_url)
        return None

    def find_by_filename(self, filename: str) -> Optional[AssetRecord]:
        """Exact filename, then exact name, then the first search hit"""
        if not filename:
            return None

        records = self._format_results(self.canto_client.search(filename))

        for record in records:
            if record.filename == filename:
                logger.debug("Found exact filename match for %s: %s", filename, record.id)
                return record

        for record in records:
            if record.name == filename:
                logger.info("Found name match for %s: %s", filename, record.id)
                return record

        if records:
            fallback = records[0]
            logger.info(
                "Using fuzzy match fallback for %s (matched %s, asset %s)",
                filename,
                fallback.filename,
                fallback.id,
            )
            return fallback

        logger.info("No filename match found for %s", filename)
        return None

    def _format_results(self, search_result) -> List[AssetRecord]:
        items = search_result.get("results") if isinstance(search_result, dict) else None
        if items is None:
            return []
        if not isinstance(items, list):
            raise UpstreamMalformedError(f"Search results are not a list: {type(items).__name__}")

        records = []
        for item in items:
            record = self.formatter.format_from_search(item)
            if record:
                records.append(record)
        return records
