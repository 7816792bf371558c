# restobot/api/schemas.py
"""API request/response schemas."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ImportKind = Literal["menu", "offers", "metadata"]


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    restaurantId: Optional[str] = None
    message: Optional[str] = None
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str


class ImportFromUrlRequest(BaseModel):
    restaurantId: Optional[str] = None
    url: Optional[str] = None
    kind: ImportKind = "menu"


class ImportFromTextRequest(BaseModel):
    restaurantId: Optional[str] = None
    text: Optional[str] = None
    kind: ImportKind = "menu"


class RescanResult(BaseModel):
    id: str
    updated: bool


class RescanResponse(BaseModel):
    results: List[RescanResult]


class DeleteResponse(BaseModel):
    success: bool = True
    id: str
    message: str = "Restaurant deleted"
