# config.py
"""Configuration settings for the lyricsmith prompt and response pipeline.
Uses Pydantic BaseSettings for automatic environment variable loading.
"""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class LyricSettings(BaseSettings):
    """Full configuration for lyricsmith."""

    # Prompt Construction
    DEFAULT_MAX_SUGGESTIONS: int = 10
    MAX_PROMPT_TOKENS: int = 100000
    # Rough English average; the model is invoked out of process so no tokenizer is available
    FALLBACK_CHARS_PER_TOKEN: float = 4.0
    TRUNCATION_SAFETY_RATIO: float = 0.9

    # Heuristic Suggestions
    SUBSTITUTION_TABLES_FILE: str | None = None

    # Logging
    LOG_LEVEL_STR: str = Field("INFO", alias="LYRICSMITH_LOG_LEVEL")
    LOG_FORMAT: str = (
        "%(asctime)s - %(levelname)s - [%(name)s:%(funcName)s:%(lineno)d] - %(message)s"
    )
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    LOG_FILE: str | None = None
    LOG_DIR: str = "logs"
    ENABLE_RICH_LOGGING: bool = True

    @model_validator(mode="after")
    def check_prompt_budget(self) -> LyricSettings:
        if self.DEFAULT_MAX_SUGGESTIONS <= 0:
            raise ValueError("DEFAULT_MAX_SUGGESTIONS must be positive")
        if self.MAX_PROMPT_TOKENS <= 0:
            raise ValueError("MAX_PROMPT_TOKENS must be positive")
        if self.FALLBACK_CHARS_PER_TOKEN <= 0:
            raise ValueError("FALLBACK_CHARS_PER_TOKEN must be positive")
        if not 0 < self.TRUNCATION_SAFETY_RATIO <= 1:
            raise ValueError("TRUNCATION_SAFETY_RATIO must be in (0, 1]")
        return self

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", populate_by_name=True, extra="ignore"
    )


settings = LyricSettings()
