# restobot/models/domain.py
"""Shapes of restaurant data as returned by the extraction collaborator."""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class MenuItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    price: str = ""
    notes: str = ""
    image: Optional[str] = None

    @field_validator("price", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        # Models sometimes answer 12.5 instead of "$12.50", or null
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class MenuCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    category: str
    items: List[MenuItem] = Field(default_factory=list)


class Offer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    details: Optional[str] = None
    code: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    daysOfWeek: List[Annotated[int, Field(ge=0, le=6)]] = Field(default_factory=list)

    @field_validator("daysOfWeek", mode="before")
    @classmethod
    def none_means_every_day(cls, v: Any) -> Any:
        return [] if v is None else v


class OrderingLink(BaseModel):
    label: Optional[str] = None
    url: str


class RestaurantMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    googleMapsUrl: Optional[str] = None
    googleReviewLink: Optional[str] = None
    orderingLinks: Optional[List[OrderingLink]] = None
    hours: Optional[Dict[str, str]] = None


Menu = TypeAdapter(List[MenuCategory])
Offers = TypeAdapter(List[Offer])
