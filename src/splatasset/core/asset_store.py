"""Holds the most recently published asset for concurrent readers."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .contracts import OutputAsset

logger = logging.getLogger(__name__)


class AssetStore:
    """Single-slot, thread-safe holder of the current OutputAsset.

    Assets are immutable, so readers get the shared instance without copying.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: Optional[OutputAsset] = None

    @property
    def current(self) -> Optional[OutputAsset]:
        with self._lock:
            return self._current

    def publish(self, asset: OutputAsset) -> bool:
        """Replace the current asset. Returns True if the content hash changed."""
        with self._lock:
            previous = self._current
            self._current = asset
        changed = previous is None or previous.content_hash != asset.content_hash
        if changed:
            logger.info(f"Published asset {asset.content_hash} ({asset.splat_count} splats)")
        else:
            logger.debug(f"Asset {asset.content_hash} unchanged")
        return changed
