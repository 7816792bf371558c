# restobot/api/dependencies.py
"""FastAPI dependencies."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, UploadFile

from restobot.config import Settings, get_settings
from restobot.core.chat import ChatService
from restobot.core.extraction.importer import ContentImporter, get_content_importer
from restobot.core.processors.image import ImageProcessor, get_image_processor
from restobot.services.llm_client import LLMClient, LLMClientError, get_llm_client
from restobot.services.store import RestaurantStore, get_restaurant_store


def get_config() -> Settings:
    """Get application settings."""
    return get_settings()


def get_store() -> RestaurantStore:
    """Get restaurant store."""
    return get_restaurant_store()


def get_llm() -> Optional[LLMClient]:
    """Get LLM client, or None when it is not configured."""
    try:
        return get_llm_client()
    except LLMClientError:
        return None


def get_chat_service(
    settings: Annotated[Settings, Depends(get_config)],
    llm: Annotated[Optional[LLMClient], Depends(get_llm)],
) -> ChatService:
    """Get chat service."""
    return ChatService(llm_client=llm, timezone=settings.TIMEZONE)


def get_importer() -> ContentImporter:
    """Get content importer; 503 when no LLM is configured."""
    try:
        return get_content_importer()
    except LLMClientError as e:
        raise HTTPException(status_code=503, detail=str(e))


def get_images() -> ImageProcessor:
    return get_image_processor()


async def read_image_upload(
    image: UploadFile, settings: Settings
) -> bytes:
    """Read an uploaded image, enforcing the size limit."""
    if image.content_type and not image.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    content = await image.read()
    size_mb = len(content) / (1024 * 1024)
    if size_mb > settings.MAX_FILE_SIZE_MB:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.MAX_FILE_SIZE_MB}MB",
        )
    return content
