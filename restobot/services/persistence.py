# restobot/services/persistence.py
# Durable storage backends for the restaurant map

import copy
import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from restobot.database.models import RestaurantRow

logger = logging.getLogger(__name__)

Records = Dict[str, Dict[str, Any]]


class PersistenceBackend(Protocol):
    """Loads and saves the whole id -> record map."""

    def load(self) -> Records: ...

    def save(self, records: Records) -> None: ...


def index_records(parsed: Any) -> Records:
    """Normalize a decoded snapshot into the keyed-object form.

    The legacy encoding is a JSON array of records; each entry is keyed
    under its own id and entries without one are dropped.
    Values that are not objects are dropped in either form.
    """
    if isinstance(parsed, dict):
        dropped = [k for k, v in parsed.items() if not isinstance(v, dict)]
        if dropped:
            logger.warning("Dropping malformed restaurant entries: %s", dropped)
        return {k: v for k, v in parsed.items() if isinstance(v, dict)}
    if isinstance(parsed, list):
        records: Records = {}
        for r in parsed:
            if isinstance(r, dict) and r.get("id"):
                records[str(r["id"])] = r
        return records
    return {}


def write_json_atomic(path: Path, records: Records) -> None:
    """Write `records` to a sibling temp file, then swap it into place."""
    payload = json.dumps(records, indent=2, ensure_ascii=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


class JsonFilePersistence:
    # Keeps every record in a single JSON file

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Records:
        if not self.path.exists():
            logger.info("No restaurant data at %s, starting empty", self.path)
            return {}
        try:
            parsed = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Error loading %s: %s", self.path, e)
            return {}
        return index_records(parsed)

    def save(self, records: Records) -> None:
        write_json_atomic(self.path, records)


class SqlPersistence:
    # Keeps one row per restaurant in a relational database

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load(self) -> Records:
        with self.session_factory() as db:
            rows = db.query(RestaurantRow).all()
            return {row.id: row.data for row in rows}

    def save(self, records: Records) -> None:
        db: Session = self.session_factory()
        try:
            db.query(RestaurantRow).filter(
                RestaurantRow.id.notin_(list(records.keys()))
            ).delete(synchronize_session=False)
            for restaurant_id, record in records.items():
                row = db.get(RestaurantRow, restaurant_id)
                if row:
                    row.data = copy.deepcopy(record)
                    row.updated_at = datetime.utcnow()
                else:
                    db.add(RestaurantRow(id=restaurant_id, data=copy.deepcopy(record)))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class MemoryPersistence:
    # Process-local snapshots, nothing survives a restart

    def __init__(self, records: Optional[Records] = None):
        self.snapshot: Records = copy.deepcopy(records or {})
        self.saves = 0

    def load(self) -> Records:
        return copy.deepcopy(self.snapshot)

    def save(self, records: Records) -> None:
        self.snapshot = copy.deepcopy(records)
        self.saves += 1


class DatedBackup:
    # One extra JSON copy per calendar day, overwritten by later saves that day

    def __init__(self, backups_dir: Path, today: Callable[[], date] = date.today):
        self.backups_dir = Path(backups_dir)
        self.today = today

    def path_for(self, day: date) -> Path:
        return self.backups_dir / f"restaurants-{day.isoformat()}.json"

    def write(self, records: Records) -> Optional[Path]:
        path = self.path_for(self.today())
        try:
            write_json_atomic(path, records)
        except (OSError, TypeError, ValueError):
            logger.exception("Backup write failed: %s", path)
            return None
        return path
