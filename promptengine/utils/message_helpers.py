"""
Telegram message helpers for delivering blueprint results.
"""
import logging
from typing import Optional, Sequence

from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message, InlineKeyboardMarkup

from promptengine.keyboards.inline import get_blueprint_card_keyboard
from promptengine.models import PromptBlueprint
from promptengine.services.blueprint_formatter import format_blueprint_card

logger = logging.getLogger(__name__)


async def safe_edit_text(
    message: Message,
    text: str,
    parse_mode: Optional[str] = None,
    reply_markup: Optional[InlineKeyboardMarkup] = None
) -> Message:
    """
    Edit a bot message; send a new one if Telegram refuses the edit.

    Returns:
        The message that now shows `text`
    """
    try:
        edited = await message.edit_text(text=text, parse_mode=parse_mode, reply_markup=reply_markup)
        return edited if isinstance(edited, Message) else message
    except TelegramBadRequest as e:
        if "message is not modified" in str(e):
            logger.debug(f"Message {message.message_id} unchanged")
            return message
        if "can't be edited" in str(e) or "message to edit not found" in str(e):
            logger.debug(f"Message {message.message_id} not editable, sending a new one")
            return await message.answer(text, parse_mode=parse_mode, reply_markup=reply_markup)
        raise


async def send_blueprint_cards(message: Message, blueprints: Sequence[PromptBlueprint]) -> int:
    """Send one card per blueprint, each with its full-prompt button. Returns the count sent."""
    for index, blueprint in enumerate(blueprints):
        await message.answer(
            format_blueprint_card(blueprint, index),
            parse_mode="HTML",
            reply_markup=get_blueprint_card_keyboard(index)
        )
    return len(blueprints)
