"""Ledger server configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings.sources.base import PydanticBaseSettingsSource

from ledger.session.refill_scheduler import DEFAULT_REFILL_DELAY_SECONDS
from shared.validators import OriginListEnvSettingsSource, parse_origin_list


class LedgerServerSettings(BaseSettings):
    model_config = {"env_prefix": "LEDGER_"}

    games_file: str = Field(default="backend/data/games.json", min_length=1)
    log_dir: str | None = "backend/logs/ledger"
    # wait between a manual pot collection and the auto bonus refill
    pot_refill_delay_seconds: float = Field(default=DEFAULT_REFILL_DELAY_SECONDS, ge=0)
    max_request_body_bytes: int = Field(default=16384, ge=1024)
    cors_origins: list[str] = ["http://localhost:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_origin_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, OriginListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings
