"""
Blueprint cards for Telegram (HTML parse mode) and copy-ready full prompts
"""
from html import escape
from typing import List, Tuple

from promptengine.models import GenerationResult, PromptBlueprint

TELEGRAM_MESSAGE_LIMIT = 4096
CARD_FIELD_LIMIT = 320  # eleven fields per card must fit in one message
FULL_PROMPT_LIMIT = 3800
ANALYSIS_LIMIT = 400  # applied before escaping

CARD_SECTIONS: List[Tuple[str, str]] = [
    ("Scene & Environment", "scene"),
    ("Placement & Interaction", "placement"),
    ("Supporting Props", "supporting_props"),
    ("Product Rules (@img1)", "dynamic_elements"),
    ("Lighting Geometry", "lighting"),
    ("Camera & Composition", "camera"),
    ("Style & Color Grading", "color"),
    ("Technical Specs", "tech_specs"),
    ("Quality Metrics", "quality"),
]


def compose_full_prompt(blueprint: PromptBlueprint) -> str:
    """Single-paragraph prompt ready to paste into an image model"""
    return (
        f"{blueprint.header}. {blueprint.scene}. {blueprint.placement}. "
        f"Props: {blueprint.supporting_props}. "
        f"Rules: {blueprint.dynamic_elements}. "
        f"Lighting: {blueprint.lighting}. "
        f"Camera: {blueprint.camera}. "
        f"Style: {blueprint.color}. "
        f"Tech: {blueprint.tech_specs}, {blueprint.quality}. "
        f"Negative: {blueprint.negative_prompts}"
    )


def _truncate(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def format_blueprint_card(blueprint: PromptBlueprint, index: int) -> str:
    """
    Render one blueprint as an HTML card.

    Args:
        blueprint: Blueprint to render
        index: Zero-based position in the result
    """
    lines = [
        f"<b>{index + 1}. {escape(blueprint.scenario_type.value.upper())}</b>",
        f"<b>{escape(_truncate(blueprint.header, CARD_FIELD_LIMIT))}</b>",
        "",
    ]
    for title, field in CARD_SECTIONS:
        lines.append(f"<u>{escape(title)}</u>")
        lines.append(escape(_truncate(getattr(blueprint, field), CARD_FIELD_LIMIT)))
        lines.append("")
    lines.append("🚫 <u>Exclude (Negative)</u>")
    lines.append(f"<i>{escape(_truncate(blueprint.negative_prompts, CARD_FIELD_LIMIT))}</i>")
    return "\n".join(lines)


def format_full_prompt_message(blueprint: PromptBlueprint) -> str:
    """Full prompt wrapped in <code> so Telegram copies it on tap"""
    prefix = f"📋 <b>{escape(blueprint.scenario_type.value)}</b>\n\n"
    body = escape(_truncate(compose_full_prompt(blueprint), FULL_PROMPT_LIMIT))
    return f"{prefix}<code>{body}</code>"


def format_result_header(result: GenerationResult, product_name: str, category: str) -> str:
    """Summary shown above the cards"""
    text = (
        f"✨ <b>{len(result.blueprints)} blueprints ready</b>\n"
        f"📦 {escape(product_name)}\n"
        f"🏷 {escape(category)}"
    )
    if result.analysis:
        text += f"\n\n🔎 <i>{escape(_truncate(result.analysis, ANALYSIS_LIMIT))}</i>"
    return text
