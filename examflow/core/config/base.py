import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import SettingsConfigDict

from examflow.model import BaseModel


class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Settings section. Dumps by alias, via :class:`examflow.model.BaseModel`.

    Accepts a plain mapping positionally, which is how dependency-injector's
    ``Configuration.as_(...)`` hands over a section.
    """

    model_config = SettingsConfigDict(env_prefix="EXAMFLOW_")

    def __init__(self, section: t.Mapping[str, t.Any] | None = None, /, **kwargs: t.Any):
        super().__init__(**{**(section or {}), **kwargs})


class BaseSecrets(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EXAMFLOW_SECRETS__", env_nested_delimiter="__")
