import enum
import pathlib


class DeploymentEnvironment(enum.Enum):
    """Selects which ``env.d/`` configuration overlay applies."""

    Local = "local"
    Test = "test"
    Development = "development"
    Staging = "staging"
    Production = "production"

    @property
    def overlay(self) -> pathlib.PurePath | None:
        # local runs straight off the root configuration
        if self is DeploymentEnvironment.Local:
            return None
        return pathlib.PurePath("env.d", self.value)
