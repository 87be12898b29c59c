from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Engine settings using pydantic-settings for structured configuration

class Settings(BaseSettings):
    # --- App ---
    app_name: str = "Vector Space Model Engine"
    app_env: str = "development"          # e.g., development / staging / production
    debug: bool = True
    # overrides the DEBUG/INFO choice made from `debug`, e.g. "WARNING"
    log_level: str | None = None

    # --- Normalizer ---
    # Replace every unicode hyphen by a space before tokenizing
    normalize_hyphens: bool = False
    # Characters in normalize_map_chars are all mapped to normalize_map_to
    normalize_map_chars: str = ""
    normalize_map_to: str = " "

    # --- Streaming training ---
    # seconds between cancellation checks while waiting on input/consumer
    stream_poll_interval: float = Field(default=0.05, gt=0)

    # pydantic v2 / pydantic-settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",     # auto-load from your .env
        case_sensitive=False,  # .env keys can be upper/lower
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Cache settings so we don’t re-parse .env on every request."""
    return Settings()
