from __future__ import annotations

import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import examflow
from examflow.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider, TimestampProvider, utcnow
from .storage import StorageContainer

# packages whose module-level functions declare di.Provide defaults
WiredPackages = ("examflow.grading", "examflow.storage")


class BootConfiguration(BaseModel):
    """The parameters a container was booted with."""

    debug: bool
    env: DeploymentEnvironment
    config_root: p.FileUrl
    secrets_path: p.AnyUrl | None = None
    override: tuple[str, ...] = ()


class ExamflowContainer(DeclarativeContainer):
    """Application container. Nothing here is usable until :meth:`boot` has run.

    Usage:
        ct = ExamflowContainer()
        ExamflowContainer.boot(ct, debug=False, env=DeploymentEnvironment.Local, config_root=url)
        engine = ct.storage.persistent.engine()
    """

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())
    utcnow: Provider[TimestampProvider] = Object(utcnow)

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, logging=logging, root=root
    )

    boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: ExamflowContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ) -> None:
        bc = BootConfiguration(
            debug=debug, env=env, config_root=config_root, secrets_path=secrets_path, override=override or ()
        )
        if bc.config_root.scheme != "file":
            raise ValueError(f"configuration root must be a local directory, got {bc.config_root}")

        ct.debug.override(bc.debug)
        ct.env.override(bc.env)
        ct.root.override(Path(examflow.__file__).resolve().parent.parent)

        settings = Settings(env=bc.env, root=bc.config_root, override=bc.override)
        ct.config.from_pydantic(settings)
        ct.secrets.from_pydantic(Secrets(env=bc.env, root=bc.secrets_path or bc.config_root))

        ct.wire(packages=list(WiredPackages))
        modules = [*(wiring or ()), *(m for name, m in sys.modules.items() if name.startswith("examflow.cli."))]
        if modules:
            ct.wire(modules=modules)

        logger = ct.logging().get_logger()
        for option in bc.override:
            key, _, value = option.partition("=")
            logger.info("configuration override", extra={"key": key.strip(), "value": value.strip()})
        logger.debug(
            "container booted",
            extra={
                "env": bc.env.value,
                "config_root": str(bc.config_root),
                "debug": bc.debug,
            },
        )
        ct.boot_config.override(bc)
