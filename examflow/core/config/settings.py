import pydantic as p
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource

from examflow.model import BaseModel, DeploymentEnvironment

from .base import BaseSettings
from .logging import LoggingSettings
from .source import OverrideSettingsSource, YAMLCascadingSettingsSource
from .storage import StorageSettings


class Settings(BaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Everything read from the configuration root at boot.

    Each section field is loaded from ``<field>.yaml``; a missing section is a
    validation error rather than a silent default.
    """

    root: p.FileUrl
    env: DeploymentEnvironment
    override: tuple[str, ...] = ()

    logging: LoggingSettings = p.Field(default=..., validate_default=True)
    storage: StorageSettings = p.Field(default=..., validate_default=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # earlier sources win; the environment is deliberately not consulted
        return init_settings, OverrideSettingsSource(settings_cls), YAMLCascadingSettingsSource(settings_cls)
