# restobot/core/menu_merge.py
"""
Menu merge.
Combines an incoming categorized menu into an existing one without losing
existing categories, items or filled-in fields.
"""

import copy
from typing import Any, Dict, List, Optional

UPDATABLE_ITEM_FIELDS = ("price", "notes", "image")


def _same_name(a: Any, b: Any) -> bool:
    # Null (or non-string) names never match anything
    if not isinstance(a, str) or not isinstance(b, str):
        return False
    return a.lower() == b.lower()


def _find(entries: List[Dict[str, Any]], key: str, name: Any) -> Optional[Dict[str, Any]]:
    for entry in entries:
        if isinstance(entry, dict) and _same_name(entry.get(key), name):
            return entry
    return None


def merge_menus(
    old_menu: List[Dict[str, Any]], new_menu: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """
    Merge `new_menu` into a copy of `old_menu`.

    Categories and items match by case-insensitive name. Unmatched ones are
    appended in incoming order; matched items take the new price, notes and
    image only when the new value is truthy. Existing names are kept.

    Args:
        old_menu: Current menu (not modified)
        new_menu: Incoming menu (not modified)

    Returns:
        The merged menu
    """
    result = copy.deepcopy(list(old_menu or []))

    for new_category in new_menu or []:
        if not isinstance(new_category, dict):
            continue

        existing = _find(result, "category", new_category.get("category"))
        if existing is None:
            result.append(copy.deepcopy(new_category))
            continue

        if not isinstance(existing.get("items"), list):
            existing["items"] = []
        items = existing["items"]

        for new_item in new_category.get("items") or []:
            if not isinstance(new_item, dict):
                continue
            item = _find(items, "name", new_item.get("name"))
            if item is None:
                items.append(copy.deepcopy(new_item))
                continue
            for field in UPDATABLE_ITEM_FIELDS:
                value = new_item.get(field)
                if value:
                    item[field] = copy.deepcopy(value)

    return result
