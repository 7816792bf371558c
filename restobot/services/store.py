# restobot/services/store.py
"""In-memory restaurant map with merge/replace update rules and durable snapshots."""

import asyncio
import copy
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from restobot.core.menu_merge import merge_menus
from restobot.services.persistence import (
    DatedBackup,
    JsonFilePersistence,
    MemoryPersistence,
    PersistenceBackend,
    SqlPersistence,
)

logger = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    """Update request is missing identifying data."""

    pass


def apply_patch(
    restaurant_id: str, existing: Optional[Dict[str, Any]], patch: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Compute the record that results from applying `patch` to `existing`.

    Neither argument is modified.

    Args:
        restaurant_id: Storage key; always wins over any `id` in the patch
        existing: Current record, or None for a new restaurant
        patch: Fields to write plus optional `replace` / `replaceOffers` flags

    Returns:
        The new record
    """
    record = copy.deepcopy(existing) if existing else {"id": restaurant_id}
    for field in ("menu", "offers", "faq"):
        if not isinstance(record.get(field), list):
            record[field] = []

    patch = copy.deepcopy(patch or {})
    # Control flags steer the update and are never stored
    replace_menu = bool(patch.pop("replace", False))
    replace_offers = bool(patch.pop("replaceOffers", False))
    new_menu = patch.pop("menu", None)
    new_offers = patch.pop("offers", None)
    patch.pop("id", None)

    # Shallow last-write-wins for everything else
    record.update(patch)

    if isinstance(new_menu, list):
        record["menu"] = new_menu if replace_menu else merge_menus(record["menu"], new_menu)

    if isinstance(new_offers, list):
        record["offers"] = new_offers if replace_offers else record["offers"] + new_offers

    record["id"] = restaurant_id
    return record


class RestaurantStore:
    # Owns the id -> record map; the only writer of durable state

    def __init__(self, backend: PersistenceBackend, backup: Optional[DatedBackup] = None):
        self.backend = backend
        self.backup = backup
        self._records: Dict[str, Dict[str, Any]] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def load(self) -> int:
        """Replace the in-memory map with the persisted snapshot."""
        self._records = dict(self.backend.load())
        for restaurant_id, record in self._records.items():
            record["id"] = restaurant_id
        logger.info("Loaded %d restaurants", len(self._records))
        return len(self._records)

    def get(self, restaurant_id: str) -> Optional[Dict[str, Any]]:
        return self._records.get(restaurant_id)

    def list(self) -> List[Dict[str, Any]]:
        return list(self._records.values())

    def ids(self) -> List[str]:
        return list(self._records.keys())

    async def upsert(
        self, restaurant_id: str, patch: Dict[str, Any], *, persist: bool = True
    ) -> Dict[str, Any]:
        """
        Create or update a restaurant record.

        Menus merge unless `replace` is set; offers append unless
        `replaceOffers` is set. The record is swapped in only after it is
        fully computed. Persistence is best effort.

        Raises:
            RecordValidationError: If restaurant_id is empty
        """
        if not restaurant_id:
            raise RecordValidationError("restaurant id is required")

        async with self._locks[restaurant_id]:
            updated = apply_patch(restaurant_id, self._records.get(restaurant_id), patch)
            self._records[restaurant_id] = updated
            if persist:
                self.persist()
            return updated

    async def delete(self, restaurant_id: str) -> bool:
        async with self._locks[restaurant_id]:
            removed = self._records.pop(restaurant_id, None) is not None
            if removed:
                self.persist()
        # The lock goes with its record
        self._locks.pop(restaurant_id, None)
        return removed

    def persist(self) -> bool:
        """Write the whole map; failures are logged and the in-memory state stays."""
        snapshot = dict(self._records)
        try:
            self.backend.save(snapshot)
        except Exception:
            logger.exception("Saving %d restaurants failed", len(snapshot))
            return False

        if self.backup is not None:
            self.backup.write(snapshot)
        return True


# Singleton
_store: RestaurantStore = None


def build_backend(settings) -> PersistenceBackend:
    """Backend selected by PERSISTENCE_BACKEND."""
    kind = settings.PERSISTENCE_BACKEND.lower()
    if kind == "json":
        return JsonFilePersistence(settings.restaurants_file)
    if kind == "memory":
        return MemoryPersistence()
    if kind == "sql":
        from restobot.database import init_db, make_engine, make_session_factory

        settings.STORAGE_DIR.mkdir(parents=True, exist_ok=True)
        engine = make_engine(settings.database_url)
        init_db(engine)
        return SqlPersistence(make_session_factory(engine))
    raise ValueError(f"Unknown PERSISTENCE_BACKEND: {settings.PERSISTENCE_BACKEND}")


def get_restaurant_store() -> RestaurantStore:
    """Get cached store instance, loaded from the configured backend."""
    global _store
    if _store is None:
        from restobot.config import get_settings

        settings = get_settings()
        _store = RestaurantStore(
            backend=build_backend(settings),
            backup=DatedBackup(settings.backups_dir),
        )
        _store.load()
    return _store
