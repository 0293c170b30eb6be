"""Prompt builders for plant identification, care advice, and chat."""

PLANT_PAL_PERSONA = (
    "You are PlantPal, a friendly plant care expert. Help diagnose plant problems and provide "
    "specific care advice. Be conversational and ask follow-up questions when helpful."
)


def build_identification_prompt() -> str:
    """Return the instruction sent alongside the plant photo."""
    return (
        "Identify this plant. Return ONLY a JSON object with 'name' (scientific name), "
        "'commonName', and 'confidence' (0-1 scale). Example: "
        '{"name":"Monstera deliciosa","commonName":"Swiss Cheese Plant","confidence":0.95}'
    )


def build_care_prompt(plant_name: str) -> str:
    """Return the structured care-instructions prompt for a species."""
    return (
        f"Provide care instructions for {plant_name}. Return ONLY a JSON object with this structure:\n"
        "{\n"
        '  "care": {\n'
        '    "watering": "detailed watering instructions",\n'
        '    "light": "light requirements",\n'
        '    "humidity": "humidity needs",\n'
        '    "temperature": "temperature range",\n'
        '    "soil": "soil requirements",\n'
        '    "fertilizer": "fertilization schedule",\n'
        '    "repotting": "repotting guidance"\n'
        "  },\n"
        '  "tips": ["tip1", "tip2", "tip3", "tip4"]\n'
        "}"
    )
