"""Secondary identification tier using an OpenAI vision-capable chat model."""

import logging

from openai import AsyncOpenAI

from models.plant_models import PlantCandidate
from models.session_models import UploadedImage
from services.errors import classify_openai_error
from services.openai.media_inputs import build_vision_messages
from services.openai.prompts import build_identification_prompt
from services.openai.reply_schemas import VisionIdentification
from services.openai.response_parser import extract_message_text, parse_json_reply
from utils.confidence import to_percent

VISION_MAX_TOKENS = 150


class VisionIdentifier:
    """Ask a generative vision model to name the plant in a photo."""

    def __init__(self, client: AsyncOpenAI, *, model: str = "gpt-4o") -> None:
        """Initialize the identifier with a shared OpenAI client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model

    async def identify(self, image: UploadedImage) -> PlantCandidate:
        """Run a single identification attempt.

        Retrying is the caller's decision; this method issues exactly one request.

        Raises:
            RemoteServiceError: Classified failure of the call or of the reply.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=build_vision_messages(build_identification_prompt(), image),
                max_tokens=VISION_MAX_TOKENS,
            )
        except Exception as exc:
            error = classify_openai_error(exc)
            logging.error("OpenAI vision request failed (%s): %s", error.kind.value, exc)
            raise error from exc

        reply = parse_json_reply(extract_message_text(response), VisionIdentification)
        return PlantCandidate(
            scientific_name=reply.name,
            common_name=(reply.common_name or "").strip() or reply.name,
            confidence_percent=to_percent(reply.confidence),
        )
