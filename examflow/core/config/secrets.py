from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from examflow.model import BaseModel, DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLCascadingSettingsSource


class DatabaseSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class Secrets(BaseSecrets, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Credentials, kept apart from settings so the secrets root can live elsewhere.

    ``database`` comes from ``EXAMFLOW_SECRETS__DATABASE__USERNAME`` and
    ``..._PASSWORD``, or from ``database.yaml`` under the secrets root.
    """

    root: p.AnyUrl
    env: DeploymentEnvironment

    database: DatabaseSecrets = DatabaseSecrets()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YAMLCascadingSettingsSource(settings_cls)
