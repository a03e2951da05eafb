import logging
from functools import wraps
from typing import Callable, Any
from aiogram import types

from promptengine.utils.logging_config import log_user_action, log_error_with_context

logger = logging.getLogger(__name__)


def _sender(message_or_callback: types.Message | types.CallbackQuery) -> Callable:
    if isinstance(message_or_callback, types.Message):
        return message_or_callback.answer
    return message_or_callback.message.answer


def log_action(action_name: str):
    """
    Decorator to log user actions

    Usage:
        @router.message(Command("start"))
        @log_action("start_command")
        async def start_handler(message: types.Message):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(message_or_callback: types.Message | types.CallbackQuery, *args, **kwargs) -> Any:
            user = message_or_callback.from_user
            log_user_action(logger, user.id, action_name, f"@{user.username}" if user.username else "")
            return await func(message_or_callback, *args, **kwargs)
        return wrapper
    return decorator


def error_handler(func: Callable) -> Callable:
    """
    Decorator to answer the user with a generic apology when a handler fails

    Usage:
        @router.message(F.photo)
        @error_handler
        async def process_image(message: types.Message):
            ...
    """
    @wraps(func)
    async def wrapper(message_or_callback: types.Message | types.CallbackQuery, *args, **kwargs) -> Any:
        try:
            return await func(message_or_callback, *args, **kwargs)
        except Exception as e:
            log_error_with_context(logger, e, f"Error in {func.__name__}", message_or_callback.from_user.id)
            await _sender(message_or_callback)(
                "❌ Something went wrong while processing your request.\n\n"
                "Please try again with /new."
            )
            return None

    return wrapper
