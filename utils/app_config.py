"""Application configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_PLANTNET_PROJECT = "weurope"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Credentials and tuning values passed explicitly to services.

    Attributes:
        plantnet_api_key: Enables the primary identification tier when set.
        openai_api_key: Enables vision identification, care advice and chat when set.
        openai_model: Chat-completions model used for every OpenAI call.
        plantnet_project: PlantNet flora/region project to query.
        request_timeout: Upper bound in seconds for each remote HTTP call.
        log_level: Root logging level name.
    """

    plantnet_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    plantnet_project: str = DEFAULT_PLANTNET_PROJECT
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @property
    def plantnet_enabled(self) -> bool:
        return bool(self.plantnet_api_key)

    @property
    def openai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build the config from environment variables (and a .env file if present)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        raw_timeout = environ.get("REQUEST_TIMEOUT_SECONDS") or str(DEFAULT_TIMEOUT_SECONDS)
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"REQUEST_TIMEOUT_SECONDS must be numeric, got {raw_timeout!r}") from exc
        if timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive.")

        return cls(
            plantnet_api_key=(environ.get("PLANTNET_API_KEY") or "").strip() or None,
            openai_api_key=(environ.get("OPENAI_API_KEY") or "").strip() or None,
            openai_model=environ.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            plantnet_project=environ.get("PLANTNET_PROJECT") or DEFAULT_PLANTNET_PROJECT,
            request_timeout=timeout,
            log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        )
