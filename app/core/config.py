"""Bot configuration settings."""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger().bind(component="config")


class BotSettings(BaseSettings):
    """Chat platform connection settings."""

    DISCORD_TOKEN: str = Field(default="", alias="DISCORD_TOKEN")
    COMMAND_PREFIX: str = Field(default="+", alias="COMMAND_PREFIX")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("COMMAND_PREFIX", mode="before")
    @classmethod
    def _validate_prefix(cls, v: Optional[str]) -> str:
        """Reject blank prefixes, which would turn every message into a command."""
        if v is None or not str(v).strip():
            logger.warning("empty_command_prefix", fallback="+")
            return "+"
        return str(v).strip()


class CommandsSettings(BaseSettings):
    """Configuration for command permissions and argument coercion.

    Moderators:
        A member is a moderator when one of their roles is listed in
        MODERATOR_ROLE_IDS, when their user id is listed in MODERATOR_USER_IDS,
        when they hold the Administrator permission or when they own the guild.

        Lists are read from the environment as JSON, e.g.
        MODERATOR_ROLE_IDS='["123456789012345678"]'

    Numbers:
        INTEGER_LIMIT bounds the absolute value accepted by the integer and
        float argument types, and is the default upper bound of ranges.
    """

    MODERATOR_ROLE_IDS: List[str] = Field(
        default_factory=list, alias="MODERATOR_ROLE_IDS"
    )
    MODERATOR_USER_IDS: List[str] = Field(
        default_factory=list, alias="MODERATOR_USER_IDS"
    )
    INTEGER_LIMIT: float = Field(default=1e20, alias="INTEGER_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Bot configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    bot: BotSettings
    commands: CommandsSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "bot": BotSettings,
            "commands": CommandsSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
