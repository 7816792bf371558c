# restobot/scripts/rescan.py
"""Refresh every restaurant from its source URLs once (run from cron)."""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from restobot.config import get_settings
from restobot.core.extraction.importer import get_content_importer
from restobot.core.extraction.rescan import rescan_all
from restobot.services.store import get_restaurant_store


async def run() -> int:
    store = get_restaurant_store()
    importer = get_content_importer()

    results = await rescan_all(
        store,
        fetch_metadata=importer.fetch_metadata,
        fetch_menu=importer.fetch_menu,
        fetch_offers=importer.fetch_offers,
    )

    for result in results:
        mark = "✓" if result["updated"] else "-"
        print(f"{mark} {result['id']}")
    print(f"Rescanned {len(results)} restaurants")
    return 0


def main():
    logging.basicConfig(level=get_settings().LOG_LEVEL.upper())
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
