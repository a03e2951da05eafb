from __future__ import annotations

import asyncio
import base64
from io import BytesIO

import pytest
from PIL import Image

from promptengine.utils.images import detect_mime_type, image_to_data_url, is_image, split_data_url
from promptengine.utils.locks import GenerationInProgress, UserGenerationLock
from promptengine.utils.validators import sanitize_text, validate_image_file, validate_product_name


def _png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_sanitize_text_strips_tags_and_whitespace():
    assert sanitize_text("  <b>Chew</b> Toy  ") == "Chew Toy"
    assert sanitize_text("") == ""
    assert sanitize_text("a" * 50, max_length=10) == "a" * 10


def test_validate_product_name():
    assert validate_product_name("Chew Toy") == (True, None)
    assert validate_product_name("") == (False, "Please enter a product name.")
    assert validate_product_name("   ")[0] is False
    is_valid, error = validate_product_name("x" * 201, max_length=200)
    assert is_valid is False and "200" in error


def test_validate_image_file():
    assert validate_image_file(1024) == (True, None)
    assert validate_image_file(0)[0] is False
    assert validate_image_file(21 * 1024 * 1024)[0] is False


def test_image_to_data_url_detects_png():
    data = _png_bytes()
    url = image_to_data_url(data)
    assert url.startswith("data:image/png;base64,")
    mime, payload = split_data_url(url)
    assert mime == "image/png"
    assert base64.b64decode(payload) == data


def test_gif_is_converted_to_png():
    buffer = BytesIO()
    Image.new("P", (4, 4), color=3).save(buffer, format="GIF")
    gif = buffer.getvalue()
    assert is_image(gif) is True

    mime, payload = split_data_url(image_to_data_url(gif))

    assert mime == "image/png"
    with Image.open(BytesIO(base64.b64decode(payload))) as converted:
        assert converted.format == "PNG"
        assert converted.size == (4, 4)


def test_multi_picture_jpeg_is_sent_as_jpeg():
    buffer = BytesIO()
    left = Image.new("RGB", (8, 8), color=(10, 120, 200))
    right = Image.new("RGB", (8, 8), color=(200, 120, 10))
    left.save(buffer, format="MPO", save_all=True, append_images=[right])
    mpo = buffer.getvalue()
    with Image.open(BytesIO(mpo)) as img:
        assert img.format == "MPO"

    mime, payload = split_data_url(image_to_data_url(mpo))

    assert mime == "image/jpeg"
    assert detect_mime_type(mpo) == "image/jpeg"
    assert base64.b64decode(payload) == mpo


def test_unknown_bytes_default_to_jpeg():
    assert detect_mime_type(b"definitely not an image") == "image/jpeg"
    assert is_image(b"definitely not an image") is False
    assert is_image(_png_bytes()) is True


def test_split_plain_base64():
    assert split_data_url("AAAA") == ("image/jpeg", "AAAA")


def test_lock_rejects_second_generation_for_same_user():
    lock = UserGenerationLock()

    async def scenario():
        async with lock.acquire(42):
            assert lock.is_processing(42)
            with pytest.raises(GenerationInProgress):
                async with lock.acquire(42):
                    pass
            # other users are independent
            async with lock.acquire(7):
                assert lock.is_processing(7)
        assert not lock.is_processing(42)
        assert not lock.is_processing(7)

    asyncio.run(scenario())


def test_lock_released_after_error():
    lock = UserGenerationLock()

    async def scenario():
        with pytest.raises(ValueError):
            async with lock.acquire(1):
                raise ValueError("boom")
        async with lock.acquire(1):
            pass
        return lock.get_stats()

    stats = asyncio.run(scenario())
    assert stats["processing_users"] == 0
    assert stats["tracked_users"] == 1


class FakeMessage:
    def __init__(self):
        self.sent = []

    async def answer(self, text, **kwargs):
        self.sent.append((text, kwargs))
        return self


def test_send_blueprint_cards_one_message_per_blueprint():
    from promptengine.services.blueprint_synthesizer import get_fallback_blueprints
    from promptengine.utils.message_helpers import send_blueprint_cards

    message = FakeMessage()
    blueprints = get_fallback_blueprints("Chew Toy", "Pet Supplies")

    count = asyncio.run(send_blueprint_cards(message, blueprints))

    assert count == 6
    assert len(message.sent) == 6
    for index, (text, kwargs) in enumerate(message.sent):
        assert text.startswith(f"<b>{index + 1}. ")
        assert kwargs["parse_mode"] == "HTML"
        button = kwargs["reply_markup"].inline_keyboard[0][0]
        assert button.callback_data == f"full_prompt:{index}"


def test_log_user_action_format(caplog):
    import logging
    from promptengine.utils.logging_config import log_user_action

    logger = logging.getLogger("promptengine.tests")
    with caplog.at_level(logging.INFO, logger="promptengine.tests"):
        log_user_action(logger, 5, "generate", "Chew Toy | Pet Supplies")
        log_user_action(logger, 5, "start")

    assert caplog.messages == ["User 5 | generate | Chew Toy | Pet Supplies", "User 5 | start"]


def test_configure_logging_adds_single_handler():
    import logging
    from promptengine.utils.logging_config import configure_logging

    root = logging.getLogger()
    before = list(root.handlers)
    old_level = root.level
    try:
        configure_logging("debug")
        configure_logging("warning")
        added = [h for h in root.handlers if h not in before]
        assert len(added) <= 1
        assert root.level == logging.WARNING
        assert logging.getLogger("aiogram").level == logging.WARNING
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(old_level)
