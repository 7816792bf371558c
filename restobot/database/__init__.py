# restobot/database/__init__.py
from restobot.database.db import init_db, make_engine, make_session_factory
from restobot.database.models import Base, RestaurantRow

__all__ = [
    "init_db",
    "make_engine",
    "make_session_factory",
    "Base",
    "RestaurantRow",
]
