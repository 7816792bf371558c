# restobot/api/routes/imports.py
# Endpoints for AI-assisted import (preview only) and the bulk rescan

import logging
from typing import Annotated, Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from PIL import UnidentifiedImageError

from restobot.api.dependencies import (
    get_config,
    get_images,
    get_importer,
    get_store,
    read_image_upload,
)
from restobot.api.schemas import (
    ImportFromTextRequest,
    ImportFromUrlRequest,
    ImportKind,
    RescanResponse,
)
from restobot.config import Settings
from restobot.core.extraction.decode import ExtractionError
from restobot.core.extraction.importer import ContentImporter
from restobot.core.extraction.rescan import rescan_all
from restobot.core.processors.image import ImageProcessor
from restobot.services.llm_client import LLMClientError, set_restaurant_context
from restobot.services.store import RestaurantStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["import"])

UPSTREAM_ERRORS = (ExtractionError, LLMClientError, httpx.HTTPError)


def _upstream_failure(kind: str, source: str, e: Exception) -> HTTPException:
    logger.error("%s import of %s failed: %s", source, kind, e)
    return HTTPException(
        status_code=502, detail=f"Failed to import {kind} from {source}: {e}"
    )


@router.post("/import-from-url")
async def import_from_url(
    request: ImportFromUrlRequest,
    importer: Annotated[ContentImporter, Depends(get_importer)],
):
    # Preview only; apply with POST /restaurants/{id}
    if not request.restaurantId or not request.url:
        raise HTTPException(status_code=400, detail="restaurantId and url are required")

    set_restaurant_context(request.restaurantId)
    try:
        data = await importer.from_url(request.kind, request.url)
    except UPSTREAM_ERRORS as e:
        raise _upstream_failure(request.kind, "URL", e)
    return {request.kind: data}


@router.post("/import-from-text")
async def import_from_text(
    request: ImportFromTextRequest,
    importer: Annotated[ContentImporter, Depends(get_importer)],
):
    # Social posts, pasted menus
    if not request.restaurantId or not request.text:
        raise HTTPException(status_code=400, detail="restaurantId and text are required")

    set_restaurant_context(request.restaurantId)
    try:
        data = await importer.from_text(request.kind, request.text)
    except UPSTREAM_ERRORS as e:
        raise _upstream_failure(request.kind, "text", e)
    return {request.kind: data}


@router.post("/import-from-image")
async def import_from_image(
    settings: Annotated[Settings, Depends(get_config)],
    importer: Annotated[ContentImporter, Depends(get_importer)],
    images: Annotated[ImageProcessor, Depends(get_images)],
    restaurantId: Optional[str] = Form(None),
    kind: ImportKind = Form("menu"),
    image: Optional[UploadFile] = File(None),
):
    if not restaurantId:
        raise HTTPException(status_code=400, detail="restaurantId is required")
    if image is None:
        raise HTTPException(status_code=400, detail="image file is required")

    content = await read_image_upload(image, settings)
    try:
        data_url = images.to_data_url(content)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="Uploaded file is not a readable image")

    set_restaurant_context(restaurantId)
    try:
        data = await importer.from_image(kind, data_url)
    except UPSTREAM_ERRORS as e:
        raise _upstream_failure(kind, "image", e)
    return {kind: data}


@router.post("/rescan", response_model=RescanResponse)
async def rescan(
    store: Annotated[RestaurantStore, Depends(get_store)],
    importer: Annotated[ContentImporter, Depends(get_importer)],
):
    # Full replace of menu and offers from each configured source
    results = await rescan_all(
        store,
        fetch_metadata=importer.fetch_metadata,
        fetch_menu=importer.fetch_menu,
        fetch_offers=importer.fetch_offers,
    )
    return RescanResponse(results=results)
