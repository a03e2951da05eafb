from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Telegram
    BOT_TOKEN: str = ""

    # Gemini API (blueprint generation)
    GEMINI_API_KEY: Optional[str] = None
    PROMPT_MODEL: str = "gemini-3-pro-preview"
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    PROMPT_TIMEOUT: int = 60  # seconds

    # Input limits
    MAX_REFERENCE_IMAGE_SIZE: int = 20 * 1024 * 1024  # 20MB, Telegram download limit
    MAX_PRODUCT_NAME_LENGTH: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_gemini_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY and self.GEMINI_API_KEY.strip())

settings = Settings()
