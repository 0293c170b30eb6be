"""Schemas the JSON replies of the generative service must satisfy."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.plant_models import CareProfile


class VisionIdentification(BaseModel):
    """`{name, commonName, confidence}` reply to the identification prompt."""

    name: str = Field(min_length=1)
    common_name: Optional[str] = Field(default=None, alias="commonName")
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class CareFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    watering: str
    light: str
    humidity: str
    temperature: str
    soil: str
    fertilizer: str
    repotting: str


class CareInstructions(BaseModel):
    """`{care: {...}, tips: [...]}` reply to the care prompt."""

    care: CareFields
    tips: List[str] = Field(default_factory=list)

    def to_profile(self) -> CareProfile:
        return CareProfile(
            watering=self.care.watering,
            light=self.care.light,
            humidity=self.care.humidity,
            temperature=self.care.temperature,
            soil=self.care.soil,
            fertilizer=self.care.fertilizer,
            repotting=self.care.repotting,
            tips=tuple(self.tips),
        )
