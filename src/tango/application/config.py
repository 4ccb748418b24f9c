from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from tango.domain.constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_RANDOM_COUNT


class AppConfig(BaseSettings):
    """
    Configuration model for tango.
    Supports loading from:
    1. Environment variables (TANGO_*)
    2. Config file (~/.config/tango/config.toml or ~/.tango.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="TANGO_",
        extra="ignore",
    )

    # Paths
    decks_dir: Path = Field(default_factory=lambda: Path.cwd() / "decks")
    data_file: Path = Field(
        default_factory=lambda: Path.home() / ".config/tango/carddata.json"
    )

    # Study runs
    random_count: int = Field(default=DEFAULT_RANDOM_COUNT, ge=1)
    prioritize_difficult: bool = False
    front_field: Literal["japanese", "english"] = "japanese"

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

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

        # First existing file wins; init (CLI) beats env beats file.
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("decks_dir", "data_file", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def _config_files() -> list[Path]:
    # Resolved per call so a patched HOME is honoured.
    return [
        Path.home() / ".config/tango/config.toml",
        Path.home() / ".tango.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/tango/config.toml (if exists)
    3. Environment variables (TANGO_*)
    4. cli_overrides (non-None values only)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
