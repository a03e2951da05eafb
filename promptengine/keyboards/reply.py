"""
Reply Keyboards
"""
from aiogram.types import ReplyKeyboardMarkup, KeyboardButton

NEW_BLUEPRINTS_BUTTON = "✨ New blueprints"
HOW_IT_WORKS_BUTTON = "ℹ️ How it works"


def get_main_menu() -> ReplyKeyboardMarkup:
    keyboard = ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=NEW_BLUEPRINTS_BUTTON)],
            [KeyboardButton(text=HOW_IT_WORKS_BUTTON)]
        ],
        resize_keyboard=True
    )
    return keyboard
