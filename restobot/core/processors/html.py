# restobot/core/processors/html.py
from __future__ import annotations

from typing import Optional

import httpx
from bs4 import BeautifulSoup

HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; RestobotImporter/1.0)"}


class HTMLProcessor:
    def __init__(self, timeout: float = 20.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch_html(self, url: str) -> str:
        """Download a page; HTTP error statuses raise httpx.HTTPStatusError."""
        async with httpx.AsyncClient(
            headers=HEADERS,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    def html_to_text(self, html: str) -> str:
        """Visible text of the page body, whitespace-collapsed."""
        soup = BeautifulSoup(html or "", "html.parser")
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()
        root = soup.body or soup
        return " ".join(root.get_text(" ", strip=True).split())

    async def fetch_text(self, url: str) -> str:
        return self.html_to_text(await self.fetch_html(url))


# convenient singleton
_html_processor: Optional[HTMLProcessor] = None


def get_html_processor() -> HTMLProcessor:
    global _html_processor
    if _html_processor is None:
        from restobot.config import get_settings

        _html_processor = HTMLProcessor(timeout=get_settings().FETCH_TIMEOUT_SECONDS)
    return _html_processor
