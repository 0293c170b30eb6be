"""Primary identification tier backed by the Pl@ntNet identify API."""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from models.plant_models import ErrorKind, PlantCandidate
from models.session_models import UploadedImage
from services.errors import RemoteServiceError, kind_for_status
from utils.confidence import to_percent

PLANTNET_BASE_URL = "https://my-api.plantnet.org/v2/identify"
PLANTNET_MODIFIERS = '["crops", "flower", "leaf", "auto"]'


class PlantNetClient:
    """Identify a plant photo with Pl@ntNet and return its top candidate."""

    def __init__(self, http_client: httpx.AsyncClient, api_key: str, *, project: str = "weurope") -> None:
        if http_client is None:
            raise ValueError("An httpx.AsyncClient is required.")
        if not api_key:
            raise ValueError("A Pl@ntNet API key is required.")
        self.http_client = http_client
        self.api_key = api_key
        self.project = project

    @property
    def url(self) -> str:
        return f"{PLANTNET_BASE_URL}/{self.project}"

    async def identify(self, image: UploadedImage) -> PlantCandidate:
        """Send one multipart request and normalize the best match.

        Raises:
            RemoteServiceError: On transport errors, non-2xx status, a body that
                is not the expected JSON shape, or an empty candidate list.
        """
        files = {"images": (image.filename, image.data, image.content_type)}
        data = {"modifiers": PLANTNET_MODIFIERS, "project": self.project}
        try:
            response = await self.http_client.post(
                self.url,
                params={"api-key": self.api_key},
                files=files,
                data=data,
            )
        except httpx.TransportError as exc:
            raise RemoteServiceError(ErrorKind.TRANSIENT_NETWORK, f"Pl@ntNet request failed: {exc}") from exc
        except httpx.RequestError as exc:
            # Undecodable body or redirect loop.
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, f"Pl@ntNet response unusable: {exc}") from exc

        if not response.is_success:
            raise RemoteServiceError(
                kind_for_status(response.status_code),
                f"Pl@ntNet API error: {response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Pl@ntNet returned non-JSON content.") from exc

        return self._parse_response(payload)

    def _parse_response(self, payload: Any) -> PlantCandidate:
        """Validate the response shape and extract the top candidate."""
        if not isinstance(payload, dict):
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Invalid Pl@ntNet response format.")

        results = payload.get("results")
        if results is not None and not isinstance(results, list):
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Pl@ntNet results must be a list.")
        if not results:
            raise RemoteServiceError(ErrorKind.NO_CANDIDATES, "No plant identified by Pl@ntNet.")

        best_match = results[0]
        species: Dict[str, Any] = best_match.get("species") if isinstance(best_match, dict) else None
        if not isinstance(species, dict):
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Invalid species data format.")

        scientific_name = species.get("scientificNameWithoutAuthor")
        if not isinstance(scientific_name, str) or not scientific_name.strip():
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, "Top match is missing a scientific name.")

        common_names = species.get("commonNames") or []
        common_name = common_names[0] if isinstance(common_names, list) and common_names else scientific_name

        try:
            confidence = to_percent(best_match.get("score"))
        except ValueError as exc:
            raise RemoteServiceError(ErrorKind.MALFORMED_RESPONSE, f"Invalid match score: {exc}") from exc

        logging.info("Pl@ntNet identified %s (%s%%)", scientific_name, confidence)
        return PlantCandidate(
            scientific_name=scientific_name.strip(),
            common_name=str(common_name),
            confidence_percent=confidence,
        )
