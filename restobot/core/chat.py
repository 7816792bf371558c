# restobot/core/chat.py
"""
Chat replies
Builds the restaurant snapshot given to the LLM and turns its answer, or its
failure, into the customer-facing reply.
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo

from restobot.core.offers import get_active_offers
from restobot.core.prompts.builder import PromptBuilder, get_prompt_builder
from restobot.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, I'm having trouble answering that right now."


@dataclass
class ChatReply:
    text: str
    degraded: bool = False


def current_time(timezone: str = "") -> datetime:
    """Now in the configured zone, or server local time when unset."""
    if timezone:
        return datetime.now(ZoneInfo(timezone))
    return datetime.now()


def build_context(record: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Copy of the record plus the offers active at `now`."""
    context = copy.deepcopy(record)
    context["activeOffers"] = copy.deepcopy(get_active_offers(record, now))
    return context


def contact_link(record: Dict[str, Any]) -> Optional[str]:
    for link in record.get("orderingLinks") or []:
        if isinstance(link, dict) and link.get("url"):
            return link["url"]
    return record.get("googleMapsUrl") or None


def fallback_message(record: Dict[str, Any]) -> str:
    phone = record.get("phone")
    link = contact_link(record)
    if phone and link:
        return f"{FALLBACK_MESSAGE} You can call us at {phone} or visit {link}."
    if phone:
        return f"{FALLBACK_MESSAGE} You can call us at {phone}."
    if link:
        return f"{FALLBACK_MESSAGE} You can visit {link}."
    return FALLBACK_MESSAGE


def build_reply(llm_result: Union[str, BaseException, None], record: Dict[str, Any]) -> ChatReply:
    """Model text verbatim on success, deterministic fallback otherwise."""
    if isinstance(llm_result, str) and llm_result:
        return ChatReply(text=llm_result)
    return ChatReply(text=fallback_message(record), degraded=True)


class ChatService:
    """Answers one customer message for one restaurant"""

    def __init__(
        self,
        llm_client: Optional[LLMClient],
        prompt_builder: Optional[PromptBuilder] = None,
        timezone: str = "",
    ):
        self.llm = llm_client
        self.prompt_builder = prompt_builder or get_prompt_builder()
        self.timezone = timezone

    def build_messages(
        self,
        record: Dict[str, Any],
        message: str,
        history: List[Dict[str, str]],
        now: datetime,
    ) -> List[Dict[str, str]]:
        context = build_context(record, now)
        messages = [
            {"role": "system", "content": self.prompt_builder.chat_system_prompt(context, now)}
        ]
        messages.extend(
            {"role": turn["role"], "content": turn["content"]} for turn in history or []
        )
        messages.append({"role": "user", "content": message})
        return messages

    async def respond(
        self,
        record: Dict[str, Any],
        message: str,
        history: Optional[List[Dict[str, str]]] = None,
        now: Optional[datetime] = None,
    ) -> ChatReply:
        """
        Answer `message`; never raises for collaborator failures.

        Args:
            record: Restaurant record
            message: Customer message
            history: Prior turns as {role, content}
            now: Evaluation instant for offers; defaults to the configured zone

        Returns:
            ChatReply, with degraded=True when the fallback was used
        """
        now = now or current_time(self.timezone)
        result: Union[str, BaseException]
        try:
            if self.llm is None:
                raise RuntimeError("LLM client is not configured")
            messages = self.build_messages(record, message, history or [], now)
            result = await self.llm.complete_text(messages)
        except Exception as e:
            result = e

        reply = build_reply(result, record)
        if reply.degraded:
            logger.warning(
                "Degraded chat reply for %s: %s", record.get("id"), result
            )
        return reply
