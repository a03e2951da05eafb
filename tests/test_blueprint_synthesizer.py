from __future__ import annotations

import pytest

from promptengine.constants import CATEGORIES
from promptengine.models import CategoryFlags, ScenarioType
from promptengine.services import blueprint_synthesizer as synth
from promptengine.services.blueprint_synthesizer import (
    get_fallback_blueprints,
    select_preset,
    synthesize,
)
from promptengine.services.category_classifier import classify

TEXT_FIELDS = (
    "header",
    "scene",
    "placement",
    "supporting_props",
    "dynamic_elements",
    "lighting",
    "camera",
    "color",
    "tech_specs",
    "quality",
    "negative_prompts",
)


def _by_scenario(blueprints):
    return {bp.scenario_type: bp for bp in blueprints}


@pytest.mark.parametrize("category", CATEGORIES + ["Miscellaneous Widgets", "", "Luxury Jewelry Boutique"])
def test_six_blueprints_in_declaration_order_with_non_empty_fields(category):
    blueprints = get_fallback_blueprints("Aurora Lamp", category)
    assert [bp.scenario_type for bp in blueprints] == list(ScenarioType)
    for bp in blueprints:
        for field in TEXT_FIELDS:
            value = getattr(bp, field)
            assert isinstance(value, str) and value.strip()


def test_synthesis_is_pure():
    first = get_fallback_blueprints("Aurora Lamp", "Home & Kitchen")
    second = get_fallback_blueprints("Aurora Lamp", "Home & Kitchen")
    assert first == second
    assert [bp.model_dump_json() for bp in first] == [bp.model_dump_json() for bp in second]


def test_header_names_scenario_and_product():
    blueprints = get_fallback_blueprints("Chew Toy", "Pet Supplies")
    assert blueprints[0].header == "Commercial Lifestyle Hero for Chew Toy"
    assert blueprints[4].header == "Commercial Artistic Flat-lay for Chew Toy"


def test_header_keeps_product_name_whitespace(pet_flags):
    blueprints = synthesize(" Chew Toy ", pet_flags, "Pet Supplies")
    assert blueprints[0].header == "Commercial Lifestyle Hero for  Chew Toy "

    unnamed = synthesize("", pet_flags, "Pet Supplies")
    assert unnamed[0].header == "Commercial Lifestyle Hero for "


def test_pet_macro_uses_pet_preset_not_macro_preset(pet_flags):
    blueprints = _by_scenario(synthesize("Chew Toy", pet_flags, "Pet Supplies"))
    macro = blueprints[ScenarioType.MACRO_TEXTURE]
    assert macro.camera == "Sony A9 III with 70-200mm f/2.8 GM II lens"
    assert macro.lighting == "High-speed sync flash or bright, flicker-free LED panels"
    assert macro.tech_specs == "Action-freeze 1/2000s shutter, ultra-sharp fur detail"


def test_pet_preset_applies_without_category_label(pet_flags):
    blueprints = _by_scenario(synthesize("Chew Toy", pet_flags))
    assert blueprints[ScenarioType.MACRO_TEXTURE].camera == "Sony A9 III with 70-200mm f/2.8 GM II lens"
    assert blueprints[ScenarioType.CATALOG_STANDARD].scene.startswith("A professional commercial environment.")


def test_small_category_gets_macro_preset_only_for_macro_texture():
    blueprints = _by_scenario(get_fallback_blueprints("Face Serum", "Beauty & Personal Care"))
    assert blueprints[ScenarioType.MACRO_TEXTURE].camera == "Sony A7R V with 90mm f/2.8 Macro lens"
    assert blueprints[ScenarioType.MACRO_TEXTURE].lighting == (
        "Ring flash for even light distribution across fine textures"
    )
    assert blueprints[ScenarioType.MACRO_TEXTURE].tech_specs == "8K, highly detailed, raw photo format"
    assert blueprints[ScenarioType.CATALOG_STANDARD].camera == "Hasselblad H6D-400c, 80mm lens"


def test_jewelry_macro_gets_luxury_preset():
    # small is set too, but luxury comes first in the chain
    blueprints = _by_scenario(get_fallback_blueprints("Gold Ring", "Clothing, Shoes & Jewelry"))
    macro = blueprints[ScenarioType.MACRO_TEXTURE]
    assert macro.camera == "Phase One XF, 100mm Trichromatic lens"
    assert macro.tech_specs == "Ultra-high fidelity, 16K textures, ray-traced reflections"


@pytest.mark.parametrize(
    "flags, camera",
    [
        (CategoryFlags(is_luxury=True, is_fashion=True, is_tech=True, is_pet=True), "Phase One XF, 100mm Trichromatic lens"),
        (CategoryFlags(is_fashion=True, is_tech=True, is_pet=True), "Sony A1 with 85mm f/1.4 G Master lens"),
        (CategoryFlags(is_tech=True, is_pet=True, is_small=True), "Leica SL2, 50mm Summilux lens"),
        (CategoryFlags(is_pet=True, is_small=True), "Sony A9 III with 70-200mm f/2.8 GM II lens"),
        (CategoryFlags(is_small=True), "Sony A7R V with 90mm f/2.8 Macro lens"),
        (CategoryFlags(is_home=True), "Hasselblad H6D-400c, 80mm lens"),
    ],
)
def test_override_precedence_first_match_wins(flags, camera):
    assert select_preset(flags, ScenarioType.MACRO_TEXTURE).camera == camera


def test_fashion_and_tech_keep_default_tech_specs():
    assert select_preset(CategoryFlags(is_fashion=True), ScenarioType.LIFESTYLE_HERO).tech_specs == (
        "8K, highly detailed, raw photo format"
    )
    assert select_preset(CategoryFlags(is_tech=True), ScenarioType.LIFESTYLE_HERO).tech_specs == (
        "8K, highly detailed, raw photo format"
    )


def test_unrecognized_category_uses_defaults_everywhere():
    assert classify("Miscellaneous Widgets") == CategoryFlags()
    for bp in get_fallback_blueprints("Widget", "Miscellaneous Widgets"):
        assert bp.camera == "Hasselblad H6D-400c, 80mm lens"
        assert bp.lighting == "Soft-box diffused studio lighting"
        assert bp.tech_specs == "8K, highly detailed, raw photo format"
        assert bp.supporting_props == synth.DEFAULT_PROPS
        assert bp.dynamic_elements == synth.DEFAULT_MOTION
        assert bp.color == synth.DEFAULT_COLOR
        assert bp.placement == synth.DEFAULT_PLACEMENT


def test_human_connection_fashion_placement():
    flags = CategoryFlags(is_fashion=True)
    blueprints = _by_scenario(synthesize("Linen Shirt", flags, "Men's Fashion"))
    assert blueprints[ScenarioType.HUMAN_CONNECTION].placement == (
        "Full body or three-quarter shot with natural posture."
    )
    assert blueprints[ScenarioType.LIFESTYLE_HERO].placement == (
        "Full body or three-quarter shot with natural posture."
    )
    assert blueprints[ScenarioType.CATALOG_STANDARD].placement == (
        "Golden ratio composition with purposeful negative space."
    )


def test_lifestyle_hero_pet_scene_has_skin_then_pet_directive(pet_flags):
    scene = _by_scenario(synthesize("Chew Toy", pet_flags, "Pet Supplies"))[ScenarioType.LIFESTYLE_HERO].scene
    base = "A professional commercial environment optimized for Pet Supplies."
    assert scene.startswith(base)
    assert synth.SKIN_DIRECTIVE in scene
    assert synth.PET_DIRECTIVE in scene
    assert scene.index(synth.SKIN_DIRECTIVE) < scene.index(synth.PET_DIRECTIVE)


def test_scene_without_directives_is_trimmed():
    scene = _by_scenario(get_fallback_blueprints("Widget", "Office Products"))[ScenarioType.CATALOG_STANDARD].scene
    assert scene == "A professional commercial environment optimized for Office Products."


def test_non_human_pet_scene_has_only_pet_directive(pet_flags):
    scene = _by_scenario(synthesize("Chew Toy", pet_flags, "Pet Supplies"))[ScenarioType.MACRO_TEXTURE].scene
    assert synth.SKIN_DIRECTIVE not in scene
    assert scene.endswith(synth.PET_DIRECTIVE)


def test_domain_specific_text_fields():
    home = get_fallback_blueprints("Sofa", "Home & Kitchen")[0]
    assert home.supporting_props == "Living room environment with high-end Scandinavian furniture."

    pet = get_fallback_blueprints("Chew Toy", "Pet Supplies")[0]
    assert pet.dynamic_elements == "Active motion blur on moving tails or soft-focus flying toys."

    tech = get_fallback_blueprints("Laptop", "Computers & Tablets")[0]
    assert tech.color == "Monochromatic with sharp accent highlights."


def test_quality_and_negative_prompts_are_constant():
    results = get_fallback_blueprints("A", "Pet Supplies") + get_fallback_blueprints("B", "Luxury Stores")
    assert {bp.quality for bp in results} == {synth.QUALITY}
    assert {bp.negative_prompts for bp in results} == {synth.NEGATIVE_PROMPTS}
