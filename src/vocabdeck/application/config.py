from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from vocabdeck.domain.constants import (
    DEFAULT_DAILY_LIMIT,
    DEFAULT_EXTEND_AMOUNT,
    DEFAULT_LEARNING_MODE,
    MAX_DAILY_LIMIT,
)

CONFIG_FILES = (
    Path(".config/vocabdeck/config.toml"),
    Path(".vocabdeck.toml"),
)


class AppConfig(BaseSettings):
    """
    Configuration model for vocabdeck.
    Supports loading from:
    1. Environment variables (VOCABDECK_*)
    2. Config file (~/.config/vocabdeck/config.toml or ~/.vocabdeck.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="VOCABDECK_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/vocabdeck")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/vocabdeck/logs")

    # New-deck defaults
    default_daily_limit: int = Field(default=DEFAULT_DAILY_LIMIT, ge=1, le=MAX_DAILY_LIMIT)
    default_learning_mode: Literal["simple", "spaced"] = DEFAULT_LEARNING_MODE
    default_extend_amount: int = Field(default=DEFAULT_EXTEND_AMOUNT, ge=1)

    # Session
    seed: int | None = None  # fixed shuffle seed, useful for reproducible runs
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = None
        for rel in CONFIG_FILES:
            candidate = Path.home() / rel
            if candidate.exists():
                toml_file = candidate
                break

        # Later sources have lower priority: CLI > env > TOML
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", "log_dir", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/vocabdeck/config.toml (if exists)
    3. Environment variables (VOCABDECK_*)
    4. cli_overrides (None values are dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
