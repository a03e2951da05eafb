"""
Deterministic blueprint synthesizer.

Builds one PromptBlueprint per ScenarioType from the product name and the
category flags. Used when the Gemini call is unavailable or unusable.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from promptengine.models import CategoryFlags, PromptBlueprint, ScenarioType
from promptengine.services.category_classifier import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraPreset:
    """Camera/lighting override. tech_specs=None keeps the current value."""

    camera: str
    lighting: str
    tech_specs: Optional[str] = None


DEFAULT_PRESET = CameraPreset(
    camera="Hasselblad H6D-400c, 80mm lens",
    lighting="Soft-box diffused studio lighting",
    tech_specs="8K, highly detailed, raw photo format",
)

LUXURY_PRESET = CameraPreset(
    camera="Phase One XF, 100mm Trichromatic lens",
    lighting="Cinematic rim lighting with subtle lens flares and high contrast",
    tech_specs="Ultra-high fidelity, 16K textures, ray-traced reflections",
)

FASHION_PRESET = CameraPreset(
    camera="Sony A1 with 85mm f/1.4 G Master lens",
    lighting="Natural window light with a soft bounce reflector",
)

TECH_PRESET = CameraPreset(
    camera="Leica SL2, 50mm Summilux lens",
    lighting="Clean futuristic neon accents and cold white key lights",
)

PET_PRESET = CameraPreset(
    camera="Sony A9 III with 70-200mm f/2.8 GM II lens",
    lighting="High-speed sync flash or bright, flicker-free LED panels",
    tech_specs="Action-freeze 1/2000s shutter, ultra-sharp fur detail",
)

MACRO_PRESET = CameraPreset(
    camera="Sony A7R V with 90mm f/2.8 Macro lens",
    lighting="Ring flash for even light distribution across fine textures",
)

PresetRule = Tuple[Callable[[CategoryFlags, ScenarioType], bool], CameraPreset]

# Evaluated top to bottom, first match wins.
# NOTE: the macro rule can only fire when luxury, fashion, tech and pet are
# all false, so "Jewelry" (small + luxury + fashion) never gets the macro
# preset. Existing output depends on this order; do not reorder.
PRESET_RULES: Tuple[PresetRule, ...] = (
    (lambda flags, scenario: flags.is_luxury, LUXURY_PRESET),
    (lambda flags, scenario: flags.is_fashion, FASHION_PRESET),
    (lambda flags, scenario: flags.is_tech, TECH_PRESET),
    (lambda flags, scenario: flags.is_pet, PET_PRESET),
    (lambda flags, scenario: flags.is_small and scenario is ScenarioType.MACRO_TEXTURE, MACRO_PRESET),
)

SKIN_DIRECTIVE = (
    "Featuring models with authentic skin textures, natural pores, "
    "diverse complexions, and candid human expressions."
)
PET_DIRECTIVE = (
    "Capturing authentic animal expressions, detailed fur textures, "
    "and natural animal-human interactions."
)

HUMAN_PLACEMENT = "Full body or three-quarter shot with natural posture."
DEFAULT_PLACEMENT = "Golden ratio composition with purposeful negative space."

HOME_PROPS = "Living room environment with high-end Scandinavian furniture."
DEFAULT_PROPS = "Understated premium props that complement the product color story."

PET_MOTION = "Active motion blur on moving tails or soft-focus flying toys."
DEFAULT_MOTION = "Subtle atmospheric dust particles or soft-focus background motion."

TECH_COLOR = "Monochromatic with sharp accent highlights."
DEFAULT_COLOR = "Natural, organic color palette with accurate skin tones."

QUALITY = "Masterpiece quality, sharp focus on primary product, soft natural fall-off."
NEGATIVE_PROMPTS = (
    "Plastic skin, airbrushed, CGI, doll-like faces, over-saturated, blurry, "
    "watermarks, bad anatomy, artificial fur sheen."
)


def select_preset(flags: CategoryFlags, scenario: ScenarioType) -> CameraPreset:
    """Return the first matching override merged over the defaults"""
    for predicate, preset in PRESET_RULES:
        if predicate(flags, scenario):
            return CameraPreset(
                camera=preset.camera,
                lighting=preset.lighting,
                tech_specs=preset.tech_specs or DEFAULT_PRESET.tech_specs,
            )
    return DEFAULT_PRESET


def _build_scene(category: str, flags: CategoryFlags, scenario: ScenarioType) -> str:
    if category:
        base = f"A professional commercial environment optimized for {category}"
    else:
        base = "A professional commercial environment"
    skin = SKIN_DIRECTIVE if scenario.is_human_focused else ""
    pet = PET_DIRECTIVE if flags.is_pet else ""
    return f"{base}. {skin} {pet}".strip()


def synthesize(product_name: str, flags: CategoryFlags, category: str = "") -> List[PromptBlueprint]:
    """
    Build the six fallback blueprints.

    Args:
        product_name: Product name as entered by the user
        flags: Flags from classify()
        category: Category label used in the scene sentence (optional)

    Returns:
        Six blueprints in ScenarioType declaration order
    """
    blueprints = []
    for scenario in ScenarioType:
        preset = select_preset(flags, scenario)
        blueprints.append(PromptBlueprint(
            scenario_type=scenario,
            header=f"Commercial {scenario.value} for {product_name}",
            scene=_build_scene(category, flags, scenario),
            placement=HUMAN_PLACEMENT if flags.is_fashion and scenario.is_human_focused else DEFAULT_PLACEMENT,
            supporting_props=HOME_PROPS if flags.is_home else DEFAULT_PROPS,
            dynamic_elements=PET_MOTION if flags.is_pet else DEFAULT_MOTION,
            lighting=preset.lighting,
            camera=preset.camera,
            color=TECH_COLOR if flags.is_tech else DEFAULT_COLOR,
            tech_specs=preset.tech_specs,
            quality=QUALITY,
            negative_prompts=NEGATIVE_PROMPTS,
        ))
    return blueprints


def get_fallback_blueprints(product_name: str, category: str) -> List[PromptBlueprint]:
    """Classify the category and synthesize blueprints for it"""
    flags = classify(category)
    logger.debug(f"Fallback blueprints for '{product_name}' | category={category!r} | {flags}")
    return synthesize(product_name, flags, category)
