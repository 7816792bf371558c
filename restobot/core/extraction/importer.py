# restobot/core/extraction/importer.py
"""
Content import
Turns web pages, social text and images into structured menu, offer or
metadata JSON via the LLM.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from restobot.core.extraction.decode import ExtractionError, decode_json
from restobot.core.processors.html import HTMLProcessor, get_html_processor
from restobot.core.prompts.builder import EXTRACTION_KINDS, get_prompt_builder
from restobot.models.domain import Menu, Offers, RestaurantMetadata
from restobot.services.llm_client import LLMClient, get_llm_client

logger = logging.getLogger(__name__)


def validate_extraction(kind: str, data: Any) -> Any:
    """
    Check decoded JSON against the shape expected for `kind`.

    Returns:
        Plain JSON-compatible data (lists for menu/offers, dict for metadata)

    Raises:
        ExtractionError: If the data does not fit the shape
    """
    try:
        if kind == "menu":
            return [c.model_dump(exclude_none=True) for c in Menu.validate_python(data)]
        if kind == "offers":
            return [o.model_dump() for o in Offers.validate_python(data)]
        if kind == "metadata":
            # null means "not found on the page", not "erase"
            return RestaurantMetadata.model_validate(data).model_dump(exclude_none=True)
    except ValidationError as e:
        raise ExtractionError(
            f"Extracted {kind} has the wrong shape: {e.error_count()} error(s)"
        ) from e
    raise ValueError(f"Unknown extraction kind: {kind}")


class ContentImporter:
    """Handles extraction of one kind of content from one payload"""

    def __init__(
        self,
        llm_client: LLMClient,
        html_processor: HTMLProcessor,
    ):
        self.llm = llm_client
        self.html_processor = html_processor
        self.prompt_builder = get_prompt_builder()

    async def _extract(self, kind: str, content: Any) -> Any:
        if kind not in EXTRACTION_KINDS:
            raise ValueError(f"Unknown extraction kind: {kind}")

        raw = await self.llm.complete_text(
            messages=[{"role": "user", "content": content}]
        )
        try:
            data = decode_json(raw)
        except ExtractionError:
            logger.warning("Unparseable %s extraction (first 300 chars): %s", kind, raw[:300])
            raise
        return validate_extraction(kind, data)

    async def from_text(self, kind: str, text: str) -> Any:
        """
        Extract from raw text (page text, social post).

        Raises:
            ExtractionError: If there is no text or the output is unusable
            LLMClientError: If the LLM call fails
        """
        if not text or not text.strip():
            raise ExtractionError("No readable text found")
        prompt = self.prompt_builder.extraction_prompt(kind, text=text, source="text")
        return await self._extract(kind, prompt)

    async def from_url(self, kind: str, url: str) -> Any:
        """Fetch a page and extract from its visible text."""
        text = await self.html_processor.fetch_text(url)
        return await self.from_text(kind, text)

    async def from_image(self, kind: str, data_url: str) -> Any:
        """Extract from an image given as a data URL."""
        prompt = self.prompt_builder.extraction_prompt(kind, source="image")
        content = [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": data_url}},
        ]
        return await self._extract(kind, content)

    # Collaborators for the bulk rescan

    async def fetch_metadata(self, url: str) -> Dict[str, Any]:
        return await self.from_url("metadata", url)

    async def fetch_menu(self, url: str) -> List[Dict[str, Any]]:
        return await self.from_url("menu", url)

    async def fetch_offers(self, url: str) -> List[Dict[str, Any]]:
        return await self.from_url("offers", url)


_importer: Optional[ContentImporter] = None


def get_content_importer() -> ContentImporter:
    """Get cached importer instance."""
    global _importer
    if _importer is None:
        _importer = ContentImporter(
            llm_client=get_llm_client(), html_processor=get_html_processor()
        )
    return _importer
