"User Handlers"
import logging
from html import escape

from aiogram import Router, F, Bot
from aiogram.filters import Command, CommandStart
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from promptengine.config import settings
from promptengine.constants import CATEGORIES
from promptengine.states import BlueprintStates
from promptengine.keyboards.inline import (
    get_category_keyboard,
    get_reference_image_keyboard,
    get_post_generation_keyboard,
    get_cancel_keyboard
)
from promptengine.keyboards.reply import get_main_menu, NEW_BLUEPRINTS_BUTTON, HOW_IT_WORKS_BUTTON
from promptengine.models import ProductInput, PromptBlueprint
from promptengine.services.prompt_generator import PromptGenerator
from promptengine.services.blueprint_formatter import (
    format_full_prompt_message,
    format_result_header
)
from promptengine.utils.decorators import error_handler, log_action
from promptengine.utils.images import image_to_data_url, is_image
from promptengine.utils.locks import user_generation_lock, GenerationInProgress
from promptengine.utils.logging_config import log_user_action
from promptengine.utils.message_helpers import safe_edit_text, send_blueprint_cards
from promptengine.utils.validators import sanitize_text, validate_product_name, validate_image_file

logger = logging.getLogger(__name__)
router = Router()

prompt_generator = PromptGenerator()

WELCOME_TEXT = """
🎨 <b>Welcome to PromptEngine!</b>

High-fidelity commercial photography blueprints for the AI era. 📸

<b>📋 How it works:</b>

1️⃣ <b>Name your product</b>
   • e.g. "Leather Chelsea Boots"

2️⃣ <b>Pick a category</b>
   • Used to tune lighting, camera and styling

3️⃣ <b>Add a reference photo</b> (optional)
   • The product is referred to as @img1 in every prompt

4️⃣ <b>Get 6 blueprints</b>
   • Lifestyle Hero, Macro Texture, Environmental Story,
     Human Connection, Artistic Flat-lay, Catalog Standard
   • Tap 📋 under a card for the copy-ready prompt

Press <b>{button}</b> or send /new to start!
"""


async def _ask_product_name(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(
        "✏️ Enter the product name:",
        reply_markup=get_cancel_keyboard()
    )
    await state.set_state(BlueprintStates.waiting_for_product_name)


@router.message(CommandStart())
@log_action("start")
async def cmd_start(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(
        WELCOME_TEXT.format(button=NEW_BLUEPRINTS_BUTTON),
        parse_mode="HTML",
        reply_markup=get_main_menu()
    )


@router.message(Command("help"))
@router.message(F.text == HOW_IT_WORKS_BUTTON)
async def how_it_works(message: Message):
    await message.answer(
        WELCOME_TEXT.format(button=NEW_BLUEPRINTS_BUTTON),
        parse_mode="HTML",
        reply_markup=get_main_menu()
    )


@router.message(Command("new"))
@router.message(F.text == NEW_BLUEPRINTS_BUTTON)
@log_action("new_blueprints")
async def new_blueprints(message: Message, state: FSMContext):
    await _ask_product_name(message, state)


@router.message(BlueprintStates.waiting_for_product_name, F.text)
async def handle_product_name(message: Message, state: FSMContext):
    name = sanitize_text(message.text)
    is_valid, error = validate_product_name(name, settings.MAX_PRODUCT_NAME_LENGTH)
    if not is_valid:
        await message.answer(f"❌ {error}", reply_markup=get_cancel_keyboard())
        return

    await state.update_data(product_name=name)
    await message.answer(
        f"📦 <b>{escape(name)}</b>\nSelect a category:",
        parse_mode="HTML",
        reply_markup=get_category_keyboard()
    )
    await state.set_state(BlueprintStates.selecting_category)


@router.message(BlueprintStates.waiting_for_product_name)
async def product_name_not_text(message: Message):
    await message.answer("❌ Please enter a product name.", reply_markup=get_cancel_keyboard())


@router.callback_query(F.data.startswith("category:"), BlueprintStates.selecting_category)
async def select_category(callback: CallbackQuery, state: FSMContext):
    try:
        category = CATEGORIES[int(callback.data.split(":", 1)[1])]
    except (IndexError, ValueError):
        logger.warning(f"Invalid category callback: {callback.data}")
        await callback.answer("Unknown category", show_alert=True)
        return

    await callback.answer()
    await state.update_data(category=category, reference_image=None)
    data = await state.get_data()
    await safe_edit_text(
        callback.message,
        f"📦 <b>{escape(data['product_name'])}</b>\n"
        f"🏷 {escape(category)}\n\n"
        f"📷 Send a reference photo of the product (as photo or file), or skip.",
        parse_mode="HTML",
        reply_markup=get_reference_image_keyboard()
    )
    await state.set_state(BlueprintStates.waiting_for_reference_image)


@router.callback_query(F.data == "back_to_categories")
async def back_to_categories(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    data = await state.get_data()
    if "product_name" not in data:
        await _ask_product_name(callback.message, state)
        return
    await safe_edit_text(
        callback.message,
        f"📦 <b>{escape(data['product_name'])}</b>\nSelect a category:",
        parse_mode="HTML",
        reply_markup=get_category_keyboard()
    )
    await state.set_state(BlueprintStates.selecting_category)


@router.message(BlueprintStates.waiting_for_reference_image, F.photo | F.document)
@error_handler
async def handle_reference_image(message: Message, state: FSMContext, bot: Bot):
    if message.photo:
        photo = message.photo[-1]
        file_id, file_size = photo.file_id, photo.file_size
    else:
        document = message.document
        if not (document.mime_type or "").startswith("image/"):
            await message.answer("❌ Please send an image file.", reply_markup=get_reference_image_keyboard())
            return
        file_id, file_size = document.file_id, document.file_size

    if file_size is not None:
        is_valid, error = validate_image_file(file_size, settings.MAX_REFERENCE_IMAGE_SIZE)
        if not is_valid:
            await message.answer(f"❌ {error}", reply_markup=get_reference_image_keyboard())
            return

    file = await bot.get_file(file_id)
    downloaded = await bot.download_file(file.file_path)
    image_bytes = downloaded.read()

    if not is_image(image_bytes):
        await message.answer("❌ Could not read this image. Try another one.", reply_markup=get_reference_image_keyboard())
        return

    await state.update_data(reference_image=image_to_data_url(image_bytes))
    log_user_action(logger, message.from_user.id, "reference_image", f"{len(image_bytes)} bytes")
    await _run_generation(message, state, message.from_user.id)


@router.message(BlueprintStates.waiting_for_reference_image)
async def reference_image_expected(message: Message):
    await message.answer(
        "📷 Send a product photo, or skip to generate without one.",
        reply_markup=get_reference_image_keyboard()
    )


@router.callback_query(F.data == "skip_image", BlueprintStates.waiting_for_reference_image)
@error_handler
async def skip_reference_image(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    await state.update_data(reference_image=None)
    await _run_generation(callback.message, state, callback.from_user.id)


@router.callback_query(F.data == "regenerate", BlueprintStates.reviewing_blueprints)
@error_handler
async def regenerate(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    await _run_generation(callback.message, state, callback.from_user.id)


async def _run_generation(message: Message, state: FSMContext, user_id: int):
    """Generate blueprints for the product stored in FSM data and send the cards"""
    data = await state.get_data()
    if not data.get("product_name") or not data.get("category"):
        await message.answer("⌛ Session expired. Let's start again.")
        await _ask_product_name(message, state)
        return

    product = ProductInput(
        name=data["product_name"],
        category=data["category"],
        image=data.get("reference_image")
    )

    try:
        async with user_generation_lock.acquire(user_id):
            await state.set_state(BlueprintStates.generating)
            status = await message.answer("⏳ Crafting 6 photography blueprints...")
            log_user_action(logger, user_id, "generate", f"{product.name[:50]} | {product.category}")
            result = await prompt_generator.generate(product)
    except GenerationInProgress:
        await message.answer("⏳ Your blueprints are already being generated, please wait.")
        return

    await state.update_data(
        blueprints=[bp.model_dump(mode="json", by_alias=True) for bp in result.blueprints]
    )

    await safe_edit_text(
        status,
        format_result_header(result, product.name, product.category),
        parse_mode="HTML"
    )
    await send_blueprint_cards(message, result.blueprints)
    await message.answer("What next?", reply_markup=get_post_generation_keyboard())
    await state.set_state(BlueprintStates.reviewing_blueprints)


@router.callback_query(F.data.startswith("full_prompt:"))
async def send_full_prompt(callback: CallbackQuery, state: FSMContext):
    data = await state.get_data()
    blueprints = data.get("blueprints") or []

    try:
        blueprint = PromptBlueprint.model_validate(blueprints[int(callback.data.split(":", 1)[1])])
    except (IndexError, ValueError):
        await callback.answer("These blueprints have expired. Start again with /new", show_alert=True)
        return

    await callback.answer("Tap the text to copy it")
    await callback.message.answer(format_full_prompt_message(blueprint), parse_mode="HTML")


@router.callback_query(F.data == "new_generation")
async def new_generation(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    await _ask_product_name(callback.message, state)


@router.callback_query(F.data == "cancel_action")
async def cancel_handler(callback: CallbackQuery, state: FSMContext):
    """Handle generic cancel action"""
    await state.clear()
    await safe_edit_text(callback.message, "❌ Cancelled. Send /new to start again.")
    await callback.answer()
