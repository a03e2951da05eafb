"""
Inline Keyboards
"""
from typing import List

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from promptengine.constants import CATEGORIES


def get_category_keyboard(categories: List[str] = CATEGORIES) -> InlineKeyboardMarkup:
    """Keyboard for picking the product category, two per row"""
    builder = InlineKeyboardBuilder()

    # Index, not the label: callback_data is limited to 64 bytes
    for index, category in enumerate(categories):
        builder.button(text=category, callback_data=f"category:{index}")

    builder.button(text="❌ Cancel", callback_data="cancel_action")
    builder.adjust(2)
    return builder.as_markup()


def get_reference_image_keyboard() -> InlineKeyboardMarkup:
    """Keyboard shown while waiting for the optional reference photo"""
    builder = InlineKeyboardBuilder()
    builder.button(text="⏭ Skip, generate without photo", callback_data="skip_image")
    builder.button(text="🔙 Back to categories", callback_data="back_to_categories")
    builder.button(text="❌ Cancel", callback_data="cancel_action")
    builder.adjust(1)
    return builder.as_markup()


def get_blueprint_card_keyboard(index: int) -> InlineKeyboardMarkup:
    """Keyboard under a single blueprint card"""
    builder = InlineKeyboardBuilder()
    builder.button(text="📋 Full prompt", callback_data=f"full_prompt:{index}")
    return builder.as_markup()


def get_post_generation_keyboard() -> InlineKeyboardMarkup:
    """Keyboard after all cards are sent"""
    builder = InlineKeyboardBuilder()
    builder.button(text="🔄 Regenerate", callback_data="regenerate")
    builder.button(text="✨ New product", callback_data="new_generation")
    builder.adjust(1)
    return builder.as_markup()


def get_cancel_keyboard() -> InlineKeyboardMarkup:
    """Get cancel keyboard"""
    builder = InlineKeyboardBuilder()
    builder.button(text="❌ Cancel", callback_data="cancel_action")
    return builder.as_markup()
