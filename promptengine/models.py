"""
Blueprint data model shared by the Gemini and fallback generation paths
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ScenarioType(str, Enum):
    """Six fixed shot categories. Declaration order is output order."""

    LIFESTYLE_HERO = "Lifestyle Hero"
    MACRO_TEXTURE = "Macro Texture"
    ENVIRONMENTAL_STORY = "Environmental Story"
    HUMAN_CONNECTION = "Human Connection"
    ARTISTIC_FLAT_LAY = "Artistic Flat-lay"
    CATALOG_STANDARD = "Catalog Standard"

    def __str__(self) -> str:
        return self.value

    @property
    def is_human_focused(self) -> bool:
        return self in (ScenarioType.HUMAN_CONNECTION, ScenarioType.LIFESTYLE_HERO)


@dataclass(frozen=True)
class CategoryFlags:
    """Domain flags derived from a category label"""

    is_fashion: bool = False
    is_tech: bool = False
    is_home: bool = False
    is_luxury: bool = False
    is_small: bool = False
    is_pet: bool = False


class PromptBlueprint(BaseModel):
    """One photography prompt record for a single scenario type"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    header: str
    scene: str
    placement: str
    supporting_props: str
    dynamic_elements: str
    lighting: str
    camera: str
    color: str
    tech_specs: str
    quality: str
    negative_prompts: str
    scenario_type: ScenarioType

    @field_validator(
        "header", "scene", "placement", "supporting_props", "dynamic_elements",
        "lighting", "camera", "color", "tech_specs", "quality", "negative_prompts"
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        # Text is kept verbatim; only all-whitespace values are refused
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class GenerationResult(BaseModel):
    """
    Six blueprints (one per scenario type, in declaration order) plus an
    optional free-text analysis.
    """

    model_config = ConfigDict(frozen=True)

    blueprints: List[PromptBlueprint]
    analysis: Optional[str] = None

    @field_validator("blueprints")
    @classmethod
    def _one_per_scenario(cls, blueprints: List[PromptBlueprint]) -> List[PromptBlueprint]:
        by_type = {bp.scenario_type: bp for bp in blueprints}
        if len(blueprints) != len(ScenarioType) or len(by_type) != len(ScenarioType):
            found = [bp.scenario_type.value for bp in blueprints]
            raise ValueError(
                f"Expected exactly one blueprint per scenario type "
                f"({len(ScenarioType)} total), got {found}"
            )
        # Remote output may arrive in any order
        return [by_type[scenario] for scenario in ScenarioType]


class ProductInput(BaseModel):
    """What the user submitted: product name, category, optional reference image"""

    name: str = Field(min_length=1)
    category: str
    image: Optional[str] = None  # data URL: data:<mime>;base64,<payload>

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Product name must not be empty")
        return value
