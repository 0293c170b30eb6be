"""Conversational reply client for free-text plant-care questions."""

import logging

from openai import AsyncOpenAI

from services.errors import classify_openai_error
from services.openai.media_inputs import build_text_messages
from services.openai.prompts import PLANT_PAL_PERSONA
from services.openai.response_parser import extract_message_text

CHAT_MAX_TOKENS = 300
CHAT_TEMPERATURE = 0.7


class PlantChatClient:
    """Send one utterance with the PlantPal persona and return the reply text."""

    def __init__(self, client: AsyncOpenAI, *, model: str = "gpt-4o") -> None:
        if client is None:
            raise ValueError("OpenAI client is required for chat.")
        self.client = client
        self.model = model

    async def reply(self, utterance: str) -> str:
        """Return the model's reply verbatim.

        Raises:
            RemoteServiceError: When the call fails or returns no text.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=build_text_messages(utterance, system_prompt=PLANT_PAL_PERSONA),
                max_tokens=CHAT_MAX_TOKENS,
                temperature=CHAT_TEMPERATURE,
            )
        except Exception as exc:
            error = classify_openai_error(exc)
            logging.error("OpenAI chat request failed (%s): %s", error.kind.value, exc)
            raise error from exc
        return extract_message_text(response)
