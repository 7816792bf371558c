# restobot/core/offers.py
"""
Offer activity windows.
Decides which promotional offers are live at a given instant.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

DAY_START = "00:00"
DAY_END = "23:59"


def parse_hhmm(value: Any) -> Optional[int]:
    """Convert an "HH:MM" string to minutes since midnight (None if unparseable)."""
    if not isinstance(value, str):
        return None
    hours, sep, minutes = value.strip().partition(":")
    if not sep:
        return None
    try:
        return int(hours) * 60 + int(minutes[:2])
    except ValueError:
        return None


def _weekday(now: datetime) -> int:
    # 0=Sunday .. 6=Saturday
    return now.isoweekday() % 7


def _days(raw: Any) -> set:
    # Entries that are not day numbers are dropped; a non-list gives no days
    days = set()
    if not isinstance(raw, (list, tuple, set)):
        return days
    for d in raw:
        try:
            days.add(int(d))
        except (TypeError, ValueError):
            continue
    return days


def is_active(offer: Dict[str, Any], now: datetime) -> bool:
    """
    Check whether an offer is live at `now`.

    Checks run in order and the first failing one makes the offer inactive:
    date window (inclusive, ISO string comparison), day of week, then time of
    day. Time windows never wrap past midnight: an end before the start gives
    an empty window. Malformed dates, days or times fail their check, so a
    bad offer is only ever hidden, never shown.
    """
    today = now.strftime("%Y-%m-%d")

    start_date = offer.get("startDate")
    if start_date and (not isinstance(start_date, str) or today < start_date):
        return False
    end_date = offer.get("endDate")
    if end_date and (not isinstance(end_date, str) or today > end_date):
        return False

    raw_days = offer.get("daysOfWeek")
    if raw_days and _weekday(now) not in _days(raw_days):
        return False

    if offer.get("startTime") or offer.get("endTime"):
        start = parse_hhmm(offer.get("startTime") or DAY_START)
        end = parse_hhmm(offer.get("endTime") or DAY_END)
        # A bound that is set but unreadable never matches
        if start is None or end is None:
            return False
        minutes = now.hour * 60 + now.minute
        if minutes < start or minutes > end:
            return False

    return True


def get_active_offers(record: Dict[str, Any], now: datetime) -> List[Dict[str, Any]]:
    """Offers of `record` that are active at `now`, in stored order."""
    offers = record.get("offers") if record else None
    if not isinstance(offers, list):
        return []
    return [o for o in offers if isinstance(o, dict) and is_active(o, now)]
