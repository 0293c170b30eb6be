"""Domain models for plant identification results and care guidance."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class IdentificationSource(str, Enum):
    """Tier that produced an identification result."""

    PRIMARY_VISION_API = "PrimaryVisionAPI"
    SECONDARY_VISION_API = "SecondaryVisionAPI"
    OFFLINE_DATABASE = "OfflineDatabase"
    GENERIC_FALLBACK = "GenericFallback"


class ErrorKind(str, Enum):
    """Classified reason a remote tier failed."""

    TRANSIENT_NETWORK = "TransientNetwork"
    RATE_LIMITED = "RateLimited"
    UNAUTHORIZED = "Unauthorized"
    MALFORMED_RESPONSE = "MalformedResponse"
    NO_CANDIDATES = "NoCandidates"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.TRANSIENT_NETWORK


@dataclass(frozen=True)
class CareProfile:
    """Structured plant-maintenance guidance.

    Attributes:
        watering: How and how often to water.
        light: Light requirements.
        humidity: Preferred humidity range.
        temperature: Preferred temperature range.
        soil: Potting medium guidance.
        fertilizer: Feeding schedule.
        repotting: When and how to repot.
        tips: Ordered extra tips.
    """

    watering: str
    light: str
    humidity: str
    temperature: str
    soil: str
    fertilizer: str
    repotting: str
    tips: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "watering": self.watering,
            "light": self.light,
            "humidity": self.humidity,
            "temperature": self.temperature,
            "soil": self.soil,
            "fertilizer": self.fertilizer,
            "repotting": self.repotting,
            "tips": list(self.tips),
        }


@dataclass(frozen=True)
class PlantCandidate:
    """Normalized top candidate returned by an identification provider."""

    scientific_name: str
    common_name: str
    confidence_percent: int


@dataclass(frozen=True)
class IdentificationResult:
    """Outcome of one completed identification attempt.

    Always carries a care profile; a new upload supersedes it rather than
    mutating it.
    """

    scientific_name: str
    common_name: str
    confidence_percent: int
    care: CareProfile
    source: IdentificationSource
    note: Optional[str] = None

    def __post_init__(self) -> None:
        if not 0 <= self.confidence_percent <= 100:
            raise ValueError(f"confidence_percent out of range: {self.confidence_percent}")
        if self.care is None:
            raise ValueError("IdentificationResult requires a care profile.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scientific_name": self.scientific_name,
            "common_name": self.common_name,
            "confidence_percent": self.confidence_percent,
            "note": self.note,
            "source": self.source.value,
            "care": self.care.to_dict(),
        }


@dataclass(frozen=True)
class ErrorDescriptor:
    """User-facing advisory describing why a fallback result is shown."""

    kind: ErrorKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class IdentificationOutcome:
    """Everything one identification run changes on the session."""

    result: IdentificationResult
    error: Optional[ErrorDescriptor] = None
    offline_mode: bool = False
