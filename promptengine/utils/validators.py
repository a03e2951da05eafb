from typing import Optional
import re


def sanitize_text(text: str, max_length: int = 1000) -> str:
    """
    Sanitize user input text

    Args:
        text: Text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove leading/trailing whitespace
    text = text.strip()

    # Truncate if too long
    if len(text) > max_length:
        text = text[:max_length]

    # Remove potential HTML/script tags (basic sanitization)
    text = re.sub(r'<[^>]+>', '', text)

    return text.strip()


def validate_product_name(name: str, max_length: int = 200) -> tuple[bool, Optional[str]]:
    """
    Validate product name entered by the user

    Args:
        name: Product name (already sanitized)
        max_length: Maximum allowed length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Please enter a product name."

    if len(name) > max_length:
        return False, f"Product name is too long. Maximum length: {max_length} characters."

    return True, None


def validate_image_file(file_size: int, max_size: int = 20 * 1024 * 1024) -> tuple[bool, Optional[str]]:
    """
    Validate image file

    Args:
        file_size: File size in bytes
        max_size: Maximum allowed file size (default 20MB)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if file_size <= 0:
        return False, "The file is empty"

    if file_size > max_size:
        max_mb = max_size / (1024 * 1024)
        return False, f"The file is too large. Maximum size: {max_mb:.0f}MB"

    return True, None
