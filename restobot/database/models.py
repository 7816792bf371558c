# restobot/database/models.py
# Database table for restaurant records

from datetime import datetime
from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class RestaurantRow(Base):
    # One row per restaurant; the whole record lives in the JSON column

    __tablename__ = "restaurants"

    id = Column(String(255), primary_key=True)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
