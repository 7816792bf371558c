# restobot/core/extraction/rescan.py
"""
Bulk rescan
Refreshes every restaurant's metadata, menu and offers from its configured
source URLs. Menus and offers are always fully replaced.
"""

import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List

from restobot.services.store import RestaurantStore

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Any]]

SOURCE_FIELDS = ("metaSourceUrl", "menuSourceUrl", "offersSourceUrl")


async def _try_fetch(restaurant_id: str, resource: str, fetch: Fetcher, url: str):
    try:
        return True, await fetch(url)
    except Exception:
        logger.exception("Rescan of %s for %s failed (%s)", resource, restaurant_id, url)
        return False, None


async def rescan_all(
    store: RestaurantStore,
    fetch_metadata: Fetcher,
    fetch_menu: Fetcher,
    fetch_offers: Fetcher,
) -> List[Dict[str, Any]]:
    """
    Refresh all restaurants that have at least one source URL.

    Restaurants and sub-resources are processed one at a time. A failed
    fetch only skips that sub-resource. The store is persisted once at the
    end.

    Args:
        store: Restaurant store to read and update
        fetch_metadata: url -> metadata dict
        fetch_menu: url -> menu list
        fetch_offers: url -> offers list

    Returns:
        [{"id": ..., "updated": bool}] for each rescanned restaurant
    """
    results = []

    for restaurant_id in store.ids():
        record = store.get(restaurant_id)
        if record is None or not any(record.get(f) for f in SOURCE_FIELDS):
            continue

        before = copy.deepcopy(record)
        patch: Dict[str, Any] = {}

        if record.get("metaSourceUrl"):
            ok, metadata = await _try_fetch(
                restaurant_id, "metadata", fetch_metadata, record["metaSourceUrl"]
            )
            if ok and isinstance(metadata, dict):
                patch.update({k: v for k, v in metadata.items() if k not in ("menu", "offers")})

        if record.get("menuSourceUrl"):
            ok, menu = await _try_fetch(
                restaurant_id, "menu", fetch_menu, record["menuSourceUrl"]
            )
            if ok and isinstance(menu, list):
                patch["menu"] = menu
                patch["replace"] = True

        if record.get("offersSourceUrl"):
            ok, offers = await _try_fetch(
                restaurant_id, "offers", fetch_offers, record["offersSourceUrl"]
            )
            if ok and isinstance(offers, list):
                patch["offers"] = offers
                patch["replaceOffers"] = True

        updated = False
        if patch:
            after = await store.upsert(restaurant_id, patch, persist=False)
            updated = after != before

        logger.info("Rescanned %s (updated=%s)", restaurant_id, updated)
        results.append({"id": restaurant_id, "updated": updated})

    store.persist()
    return results
