"""Layered chat replies: keyword table, remote model, heuristics, canned advice."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from models.plant_models import ErrorKind
from services import knowledge_base
from services.errors import RemoteServiceError

HIGH_DEMAND_PREFIX = "I'm experiencing high demand right now. Here's what I can tell you from my offline knowledge: "
HIGH_DEMAND_FALLBACK = "Try asking a more specific question about watering, light, or common plant problems."


class ChatClient(Protocol):
    async def reply(self, utterance: str) -> str: ...


class ChatOrchestrator:
    """Produce exactly one assistant reply per user utterance.

    The keyword table always wins over the remote model. The remote model is
    called at most once per utterance; there is no retry loop here.
    """

    def __init__(self, chat_client: Optional[ChatClient] = None) -> None:
        self.chat_client = chat_client

    async def reply(self, utterance: str) -> str:
        try:
            return await self._reply(utterance)
        except Exception:
            logging.exception("Chat response failed")
            return knowledge_base.CHAT_FAILURE_REPLY

    async def _reply(self, utterance: str) -> str:
        advice = knowledge_base.match_care_problem(utterance)
        if advice:
            return advice

        if self.chat_client is not None:
            try:
                return await self.chat_client.reply(utterance)
            except Exception as exc:
                if isinstance(exc, RemoteServiceError) and exc.kind is ErrorKind.RATE_LIMITED:
                    logging.warning("Chat rate limited, answering from offline knowledge")
                    return HIGH_DEMAND_PREFIX + (knowledge_base.offline_reply(utterance) or HIGH_DEMAND_FALLBACK)
                logging.error("Chat API error: %s", exc)

        return knowledge_base.match_topic_heuristic(utterance) or knowledge_base.GENERIC_CHAT_REPLY
