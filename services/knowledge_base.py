"""Bundled plant archetypes, care profiles, and keyword advice used offline."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional

from models.plant_models import CareProfile

GREETING = (
    "Hi! I'm your PlantPal assistant. Ask me anything about plant care - like "
    "'Why are my plant's leaves turning yellow?' or 'How often should I water my succulent?'"
)

OFFLINE_NOTE = (
    "This is an example identification based on common houseplants. "
    "For accurate identification, try again when AI services are available."
)

MORE_DETAIL_PROMPT = "\n\nFor more specific help, please describe your plant type and current care routine."


@dataclass(frozen=True)
class PlantArchetype:
    """A representative plant bundled for offline identification."""

    scientific_name: str
    common_name: str
    confidence_percent: int
    care: CareProfile


COMMON_PLANTS: Dict[str, PlantArchetype] = {
    "broad_leaves_indoor": PlantArchetype(
        scientific_name="Monstera deliciosa",
        common_name="Swiss Cheese Plant",
        confidence_percent=75,
        care=CareProfile(
            watering="Water when top 1-2 inches of soil are dry, usually every 1-2 weeks",
            light="Bright, indirect light. Avoid direct sunlight",
            humidity="Prefers 50-60% humidity. Mist regularly or use humidity tray",
            temperature="65-80°F (18-27°C)",
            soil="Well-draining potting mix with peat or coco coir",
            fertilizer="Monthly during spring and summer with balanced liquid fertilizer",
            repotting="Every 1-2 years in spring when rootbound",
            tips=(
                "Support with moss pole for climbing growth",
                "Wipe leaves weekly to remove dust",
                "Fenestrations (holes) develop with maturity",
                "Prune aerial roots if they become unruly",
            ),
        ),
    ),
    "succulent_thick_leaves": PlantArchetype(
        scientific_name="Echeveria elegans",
        common_name="Mexican Snow Ball",
        confidence_percent=70,
        care=CareProfile(
            watering="Water deeply but infrequently, every 10-14 days. Allow soil to dry completely",
            light="Bright, direct sunlight for 6+ hours daily",
            humidity="Low humidity preferred, 30-40%",
            temperature="65-75°F (18-24°C)",
            soil="Cactus/succulent mix with excellent drainage",
            fertilizer="Diluted cactus fertilizer monthly during growing season",
            repotting="Every 2-3 years in spring",
            tips=(
                "Water at soil level, avoid getting leaves wet",
                "Provide excellent drainage to prevent root rot",
                "Reduce watering in winter months",
                "Propagate easily from leaf cuttings",
            ),
        ),
    ),
    "small_green_leaves": PlantArchetype(
        scientific_name="Pothos aureus",
        common_name="Golden Pothos",
        confidence_percent=80,
        care=CareProfile(
            watering="Water when top inch of soil is dry, usually weekly",
            light="Low to bright, indirect light. Very adaptable",
            humidity="Average household humidity (40-50%)",
            temperature="65-75°F (18-24°C)",
            soil="Regular potting mix with good drainage",
            fertilizer="Monthly during growing season",
            repotting="Every 2-3 years when rootbound",
            tips=(
                "Excellent air purifier",
                "Can grow in water or soil",
                "Trim long vines to encourage bushy growth",
                "Very forgiving and low-maintenance",
            ),
        ),
    ),
}

# Returned by the care fetcher whenever structured care cannot be obtained.
GENERIC_CARE_PROFILE = CareProfile(
    watering="Water when top inch of soil feels dry, usually every 1-2 weeks",
    light="Bright, indirect light works for most houseplants",
    humidity="Average household humidity (40-50%) is adequate",
    temperature="65-75°F (18-24°C) is ideal for most plants",
    soil="Well-draining potting mix appropriate for plant type",
    fertilizer="Monthly feeding during spring and summer",
    repotting="Every 1-2 years when plant becomes rootbound",
    tips=(
        "Check soil moisture before watering",
        "Rotate plant weekly for even growth",
        "Remove dead leaves promptly",
        "Monitor for pests regularly",
        "Adjust care based on seasonal changes",
    ),
)

# Attached to the terminal GenericFallback result.
GENERAL_HOUSEPLANT_CARE = CareProfile(
    watering="Water when top inch of soil feels dry to touch",
    light="Most houseplants prefer bright, indirect light",
    humidity="Average household humidity (40-60%) is suitable for most plants",
    temperature="Keep between 65-75°F (18-24°C) for optimal growth",
    soil="Use well-draining potting mix appropriate for plant type",
    fertilizer="Feed monthly during spring and summer growing season",
    repotting="Repot every 1-2 years when plant becomes rootbound",
    tips=(
        "Observe your plant daily for changes in appearance",
        "Check soil moisture before watering",
        "Rotate plant weekly for even light exposure",
        "Remove dead or yellowing leaves promptly",
        "Research your specific plant type for targeted care",
    ),
)

GENERAL_HOUSEPLANT_NAME = "Plant identification unavailable"
GENERAL_HOUSEPLANT_COMMON_NAME = "General Houseplant"

# Iteration order is the tie-break: the first matching keyword wins.
CARE_PROBLEM_ADVICE: Dict[str, str] = {
    "yellow leaves": (
        "Yellow leaves usually indicate overwatering, underwatering, or natural aging. "
        "Check soil moisture - if soggy, reduce watering. If dry, increase frequency. "
        "Remove yellow leaves to redirect energy to healthy growth."
    ),
    "brown tips": (
        "Brown leaf tips typically result from low humidity, fluoride in tap water, or overfertilization. "
        "Increase humidity, use filtered water, and reduce fertilizer. Trim brown tips with clean scissors."
    ),
    "dropping leaves": (
        "Leaf drop can indicate stress from changes in light, watering, or environment. "
        "Maintain consistent care routine and avoid moving the plant frequently. "
        "Some leaf drop is normal when adjusting to new conditions."
    ),
    "not growing": (
        "Slow growth may indicate insufficient light, nutrients, or it may be dormant season. "
        "Ensure adequate bright light, feed during growing season (spring/summer), "
        "and be patient during winter months."
    ),
    "pests": (
        "Common pests include spider mites, aphids, and mealybugs. Inspect regularly, isolate affected plants, "
        "and treat with insecticidal soap or neem oil. Increase humidity to prevent spider mites."
    ),
    "overwatering": (
        "Signs include yellow leaves, musty smell, or soft stems. Allow soil to dry out, improve drainage, "
        "and reduce watering frequency. Remove affected roots if repotting."
    ),
    "underwatering": (
        "Signs include wilting, dry soil, and crispy leaves. Water thoroughly until water drains from bottom. "
        "Establish consistent watering schedule based on soil moisture."
    ),
}

WATERING_REPLY = (
    "Most plants should be watered when the top inch of soil feels dry. Stick your finger into the soil - "
    "if it's dry, it's time to water. Water thoroughly until it drains from the bottom, then empty the saucer."
)
LIGHT_REPLY = (
    "Most houseplants prefer bright, indirect light. Place them near a window but not in direct sunlight, "
    "which can scorch leaves. If you notice leggy growth, your plant likely needs more light."
)
FERTILIZER_REPLY = (
    "Feed your plants monthly during spring and summer with a balanced liquid fertilizer diluted to half "
    "strength. Stop fertilizing in fall and winter when growth slows."
)

GENERIC_CHAT_REPLY = (
    "I'm having trouble connecting to my knowledge base right now. For general plant care, remember: "
    "check soil moisture before watering, provide bright indirect light, and maintain good drainage. "
    "What specific plant problem are you experiencing?"
)
CHAT_FAILURE_REPLY = (
    "I'm having trouble right now, but here's some general advice: Most plant problems stem from watering "
    "issues. Check if your soil is too wet or too dry, ensure good drainage, and provide bright indirect "
    "light. What specific symptoms are you seeing?"
)


def match_care_problem(message: str) -> Optional[str]:
    """Return keyword-table advice for the first matching problem, if any."""
    lowered = message.lower()
    for keyword, advice in CARE_PROBLEM_ADVICE.items():
        if keyword in lowered:
            return advice + MORE_DETAIL_PROMPT
    return None


def match_topic_heuristic(message: str) -> Optional[str]:
    """Return a canned reply for watering, light, or fertilizer questions."""
    lowered = message.lower()
    if "water" in lowered:
        return WATERING_REPLY
    if "light" in lowered:
        return LIGHT_REPLY
    if "fertilizer" in lowered or "feed" in lowered:
        return FERTILIZER_REPLY
    return None


def offline_reply(message: str) -> Optional[str]:
    """Best answer available without any remote service."""
    return match_care_problem(message) or match_topic_heuristic(message)


def pick_offline_archetype(rng: random.Random) -> PlantArchetype:
    """Pick a plausible archetype; no image features are considered."""
    key = rng.choice(list(COMMON_PLANTS))
    return COMMON_PLANTS[key]
