"""Care-profile fetcher backed by an OpenAI text model."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from openai import AsyncOpenAI

from models.plant_models import CareProfile
from services.errors import classify_openai_error
from services.knowledge_base import GENERIC_CARE_PROFILE
from services.openai.media_inputs import build_text_messages
from services.openai.prompts import build_care_prompt
from services.openai.reply_schemas import CareInstructions
from services.openai.response_parser import extract_message_text, parse_json_reply

CARE_MAX_TOKENS = 600
CARE_RETRIES = 1
CARE_RETRY_DELAY_SECONDS = 1.0

Sleep = Callable[[float], Awaitable[None]]


class CareProfileFetcher:
    """Fetch structured care instructions for a species, never failing outward."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        *,
        model: str = "gpt-4o",
        retries: int = CARE_RETRIES,
        retry_delay: float = CARE_RETRY_DELAY_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.model = model
        self.retries = retries
        self.retry_delay = retry_delay
        self.sleep = sleep

    async def fetch(self, plant_name: str) -> CareProfile:
        """Return the remote care profile, or the generic profile on any failure."""
        if self.client is None:
            return GENERIC_CARE_PROFILE

        for attempt in range(self.retries + 1):
            try:
                return await self._request_profile(plant_name)
            except Exception as exc:
                logging.warning(
                    "Care instructions attempt %d/%d for %s failed: %s",
                    attempt + 1,
                    self.retries + 1,
                    plant_name,
                    exc,
                )
            if attempt < self.retries:
                await self.sleep(self.retry_delay)

        logging.info("Using generic care profile for %s", plant_name)
        return GENERIC_CARE_PROFILE

    async def _request_profile(self, plant_name: str) -> CareProfile:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=build_text_messages(build_care_prompt(plant_name)),
                max_tokens=CARE_MAX_TOKENS,
            )
        except Exception as exc:
            raise classify_openai_error(exc) from exc
        return parse_json_reply(extract_message_text(response), CareInstructions).to_profile()
