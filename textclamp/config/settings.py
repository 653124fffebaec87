"""
Configuration settings using Pydantic Settings.

Every value here is a default. Options passed explicitly to ``clamp()`` always
take precedence over what the environment provides.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_BOUNDARY_PRIORITY: tuple[str, ...] = (".", "-", "–", "—", " ")


class Settings(BaseSettings):
    """Library defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Ensure .env values take precedence over system environment variables.
    # Order: init kwargs > .env (dotenv) > env vars > file secrets
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    # Clamp defaults
    default_clamp_lines: int = Field(2, ge=1, alias="TEXTCLAMP_DEFAULT_LINES")
    truncation_marker: str = Field("…", alias="TEXTCLAMP_TRUNCATION_MARKER")
    boundary_priority: Annotated[tuple[str, ...], NoDecode] = Field(
        DEFAULT_BOUNDARY_PRIORITY,
        alias="TEXTCLAMP_BOUNDARY_PRIORITY",
        description="Comma separated split tokens, highest priority first",
    )
    prefer_native_clamp: bool = Field(True, alias="TEXTCLAMP_PREFER_NATIVE_CLAMP")

    # Animation
    step_delay_ms: float = Field(16.6, gt=0, alias="TEXTCLAMP_STEP_DELAY_MS")

    # Layout
    fallback_font_size_px: float = Field(16.0, gt=0, alias="TEXTCLAMP_FONT_SIZE_PX")
    normal_line_height_factor: float = Field(1.2, gt=0, alias="TEXTCLAMP_NORMAL_LINE_HEIGHT")
    default_width_px: float = Field(320.0, gt=0, alias="TEXTCLAMP_DEFAULT_WIDTH_PX")
    font_path: str | None = Field(
        None,
        validation_alias=AliasChoices("TEXTCLAMP_FONT_PATH", "TEXTCLAMP_FONT"),
        description="TrueType/OpenType font used by the Pillow layout",
    )

    # Logging
    log_level: str = Field("INFO", alias="TEXTCLAMP_LOG_LEVEL")

    @field_validator("boundary_priority", mode="before")
    @classmethod
    def _split_boundary_list(cls, value):
        # Env values arrive as a comma separated string; a literal comma can't
        # be expressed there, pass it through ClampOptions instead.
        if isinstance(value, str):
            if not value:
                return ()
            return tuple(token.replace("\\s", " ") for token in value.split(","))
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    This function provides dependency injection support for settings; call
    ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()
