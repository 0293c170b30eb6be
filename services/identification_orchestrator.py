"""Tiered plant identification with graceful degradation.

Tiers run strictly in order and the first success wins:

1. Primary vision API (Pl@ntNet), single attempt.
2. Secondary generative vision API (OpenAI), retried with exponential
   backoff for transient failures only. Rate limiting is never retried.
3. Offline database: a plausible bundled archetype with a disclaimer.

Any failure of a remote tier, classified or not, advances to the next tier.
Remote results receive a care profile from the care fetcher; the offline
entry uses its bundled profile. If the care or offline path itself fails the
fixed generic result is returned, so `identify` never raises.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Protocol

from models.plant_models import (
    ErrorDescriptor,
    ErrorKind,
    IdentificationOutcome,
    IdentificationResult,
    IdentificationSource,
    PlantCandidate,
)
from models.session_models import UploadedImage
from services import knowledge_base
from services.errors import RemoteServiceError
from services.openai.care_advisor import CareProfileFetcher

SECONDARY_RETRIES = 2
BACKOFF_BASE_SECONDS = 1.0

RATE_LIMITED_MESSAGE = "Plant identification is in high demand right now (API quota exceeded). Using offline identification."
UNAUTHORIZED_MESSAGE = "API key invalid. Using offline identification."
UNAVAILABLE_MESSAGE = "AI services unavailable. Using offline identification."
TERMINAL_MESSAGE = "Unable to identify plant. Please try again or ask in the chat for help."

Sleep = Callable[[float], Awaitable[None]]


class IdentificationClient(Protocol):
    async def identify(self, image: UploadedImage) -> PlantCandidate: ...


def describe_failure(kind: ErrorKind) -> ErrorDescriptor:
    """Collapse a secondary-tier failure into one of the user-facing advisories."""
    if kind is ErrorKind.RATE_LIMITED:
        return ErrorDescriptor(ErrorKind.RATE_LIMITED, RATE_LIMITED_MESSAGE)
    if kind is ErrorKind.UNAUTHORIZED:
        return ErrorDescriptor(ErrorKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)
    return ErrorDescriptor(ErrorKind.SERVICE_UNAVAILABLE, UNAVAILABLE_MESSAGE)


def generic_fallback_result() -> IdentificationResult:
    return IdentificationResult(
        scientific_name=knowledge_base.GENERAL_HOUSEPLANT_NAME,
        common_name=knowledge_base.GENERAL_HOUSEPLANT_COMMON_NAME,
        confidence_percent=0,
        care=knowledge_base.GENERAL_HOUSEPLANT_CARE,
        source=IdentificationSource.GENERIC_FALLBACK,
    )


class IdentificationOrchestrator:
    """Sequence the identification tiers and attach care instructions."""

    def __init__(
        self,
        *,
        care_fetcher: CareProfileFetcher,
        primary: Optional[IdentificationClient] = None,
        secondary: Optional[IdentificationClient] = None,
        retries: int = SECONDARY_RETRIES,
        backoff_base: float = BACKOFF_BASE_SECONDS,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            care_fetcher: Source of care profiles for remote identifications.
            primary: Tier 1 client, or None when its credential is absent.
            secondary: Tier 2 client, or None when its credential is absent.
            retries: Additional Tier 2 attempts after a transient failure.
            backoff_base: First backoff delay in seconds; doubles per attempt.
            sleep: Awaitable delay function, injectable for tests.
            rng: Random source for the offline guess.
        """
        self.care_fetcher = care_fetcher
        self.primary = primary
        self.secondary = secondary
        self.retries = retries
        self.backoff_base = backoff_base
        self.sleep = sleep
        self.rng = rng or random.Random()

    async def identify(self, image: UploadedImage) -> IdentificationOutcome:
        """Produce exactly one identification outcome for the image."""
        try:
            return await self._run_tiers(image)
        except Exception:
            logging.exception("All identification methods failed")
            return IdentificationOutcome(
                result=generic_fallback_result(),
                error=ErrorDescriptor(ErrorKind.SERVICE_UNAVAILABLE, TERMINAL_MESSAGE),
                offline_mode=True,
            )

    async def _run_tiers(self, image: UploadedImage) -> IdentificationOutcome:
        logging.info("Starting plant identification for %s", image.filename)
        error: Optional[ErrorDescriptor] = None

        if self.primary is not None:
            try:
                candidate = await self.primary.identify(image)
            except Exception as exc:
                logging.warning("Primary identification failed, trying secondary: %s", exc)
            else:
                return await self._remote_outcome(candidate, IdentificationSource.PRIMARY_VISION_API)

        if self.secondary is not None:
            try:
                candidate = await self._identify_with_retries(image)
            except Exception as exc:
                logging.warning("Secondary identification failed, using offline fallback: %s", exc)
                kind = exc.kind if isinstance(exc, RemoteServiceError) else ErrorKind.SERVICE_UNAVAILABLE
                error = describe_failure(kind)
            else:
                return await self._remote_outcome(candidate, IdentificationSource.SECONDARY_VISION_API)

        logging.info("Using offline plant identification")
        return IdentificationOutcome(result=self._offline_result(), error=error, offline_mode=True)

    async def _identify_with_retries(self, image: UploadedImage) -> PlantCandidate:
        """Call the secondary tier, backing off 1s, 2s, ... between transient failures."""
        attempts = self.retries + 1
        for attempt in range(attempts):
            logging.info("Secondary identification attempt %d/%d", attempt + 1, attempts)
            try:
                return await self.secondary.identify(image)
            except RemoteServiceError as exc:
                if not exc.kind.retryable or attempt == attempts - 1:
                    raise
                delay = self.backoff_base * (2 ** attempt)
                logging.info("Transient failure (%s), retrying in %.1fs", exc, delay)
                await self.sleep(delay)
        raise RemoteServiceError(ErrorKind.SERVICE_UNAVAILABLE, "Secondary identification made no attempts.")

    async def _remote_outcome(self, candidate: PlantCandidate, source: IdentificationSource) -> IdentificationOutcome:
        care = await self.care_fetcher.fetch(candidate.scientific_name)
        result = IdentificationResult(
            scientific_name=candidate.scientific_name,
            common_name=candidate.common_name,
            confidence_percent=candidate.confidence_percent,
            care=care,
            source=source,
        )
        return IdentificationOutcome(result=result)

    def _offline_result(self) -> IdentificationResult:
        archetype = knowledge_base.pick_offline_archetype(self.rng)
        return IdentificationResult(
            scientific_name=f"{archetype.scientific_name} (estimated)",
            common_name=f"{archetype.common_name} (example)",
            confidence_percent=self.rng.randint(40, 69),
            care=archetype.care,
            source=IdentificationSource.OFFLINE_DATABASE,
            note=knowledge_base.OFFLINE_NOTE,
        )
