from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

THEME_NAMES = ("dark", "light")

class Settings(BaseSettings):
    # App/Env
    ENV: str = "dev"
    APP_NAME: str = "slidemaker"
    PRODUCT_NAME: str = "SlideMaker"
    PORT: int = 8080

    # Synthesis (OpenAI-compatible chat endpoint)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    SYNTHESIS_MODEL: str = "default"
    SYNTHESIS_TEMPERATURE: float = 0.2

    # Decks
    DEFAULT_THEME: str = "dark"
    HISTORY_CAPACITY: int = 20

    # Uploads / conversion
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024  # 25 MB
    SOFFICE_BIN: Optional[str] = None
    SOFFICE_TIMEOUT_S: int = 90

    @field_validator("DEFAULT_THEME", mode="before")
    @classmethod
    def _theme_name(cls, v):
        name = str(v or "dark").strip().lower()
        if name not in THEME_NAMES:
            raise ValueError(f"DEFAULT_THEME must be one of {THEME_NAMES}, got {v!r}")
        return name

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

settings = Settings()
