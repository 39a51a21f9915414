"""
Catalog Cache - Loading of the Customization Catalog.

The catalog (ordered steps and the options offered in each) is read from the
JSON document at CATALOG_PATH and kept in memory for CATALOG_TTL_SECONDS.

Features:
- Lazy loading on first use
- Time-based refresh
- Keeps serving the last good catalog if a refresh fails

Usage:
    from dish_builder.catalog_cache import catalog_cache

    catalog = catalog_cache.get()
    option = catalog.resolve_option(step_id=1, option_id=10)
"""

import json
import logging
import threading
import time
from typing import Any, Mapping, Optional

from fastapi import HTTPException

from . import config
from .builder.catalog_index import CatalogIndex

logger = logging.getLogger(__name__)


class CatalogCache:
    """Thread-safe, time-bounded cache of one CatalogIndex."""

    def __init__(self, path: Optional[str] = None, ttl_seconds: Optional[int] = None):
        self._path = path
        self._ttl_seconds = ttl_seconds
        self._catalog: Optional[CatalogIndex] = None
        self._loaded_at: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path or config.CATALOG_PATH

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds if self._ttl_seconds is not None else config.CATALOG_TTL_SECONDS

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    def get(self) -> CatalogIndex:
        """
        Return the cached catalog, loading or refreshing it when stale.

        Raises:
            OSError, ValueError: If no catalog has ever loaded and the
                document cannot be read or parsed
        """
        with self._lock:
            if self._catalog is None or self._is_stale():
                self._refresh()
            return self._catalog

    def load_payload(self, payload: Mapping[str, Any]) -> CatalogIndex:
        """Replace the cached catalog with one built from an in-memory document."""
        catalog = CatalogIndex.from_payload(payload)
        with self._lock:
            self._catalog = catalog
            self._loaded_at = time.monotonic()
        return catalog

    def invalidate(self) -> None:
        with self._lock:
            self._catalog = None
            self._loaded_at = None

    def _is_stale(self) -> bool:
        return self._loaded_at is None or time.monotonic() - self._loaded_at >= self.ttl_seconds

    def _refresh(self) -> None:
        try:
            with open(self.path, encoding="utf-8") as fh:
                payload = json.load(fh)
            catalog = CatalogIndex.from_payload(payload)
        except (OSError, ValueError) as e:
            if self._catalog is None:
                raise
            logger.warning("Catalog refresh from %s failed, keeping previous catalog: %s", self.path, e)
            self._loaded_at = time.monotonic()
            return
        self._catalog = catalog
        self._loaded_at = time.monotonic()
        logger.info("Loaded catalog from %s", self.path)


catalog_cache = CatalogCache()


def get_catalog() -> CatalogIndex:
    """
    FastAPI dependency that yields the current catalog.

    Responds 503 when no catalog can be loaded.
    """
    try:
        return catalog_cache.get()
    except (OSError, ValueError) as e:
        logger.error("Catalog unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Catalog unavailable")
