from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import examflow.lib.json as json

from ..config.secrets import DatabaseSecrets
from ..config.storage import DatabaseSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def create_dsn(config: DatabaseSettings, secrets: DatabaseSecrets) -> DSN:
    """Connection URL for the configured database. SQLite takes only a path."""
    if config.is_sqlite:
        return DSN.create(config.driver, database=config.database)

    def reveal(secret: t.Any) -> str | None:
        return secret.get_secret_value() if secret is not None else None

    return DSN.create(
        config.driver,
        username=reveal(secrets.username),
        password=reveal(secrets.password),
        host=str(config.host) if config.host is not None else None,
        port=config.port,
        database=config.database,
    )


def provide_engine(config: DatabaseSettings, secrets: DatabaseSecrets, logging: LoggingProvider) -> sqlalchemy.Engine:
    connect_args: dict[str, t.Any] = {}
    if not config.is_sqlite:
        # timestamptz values come back in UTC regardless of server defaults
        connect_args["options"] = "-c timezone=UTC"

    engine = sqlalchemy.create_engine(
        create_dsn(config, secrets),
        echo=config.echo,
        json_serializer=json.dumps,
        json_deserializer=json.loads,
        connect_args=connect_args,
    )
    logging.get_logger().info(
        "database engine ready",
        extra={
            "dialect": engine.dialect.name,
            "database": config.database,
            "host": config.host,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """A fresh session per injection. It does not autobegin: work happens inside ``session.begin()``."""
    return sqlalchemy.orm.Session(engine, autobegin=False, autoflush=False, expire_on_commit=False)


def provide_alembic_config(
    config: DatabaseSettings, secrets: DatabaseSecrets, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("migrations are located relative to the project root, which is set at boot")

    url = create_dsn(config, secrets).render_as_string(hide_password=False)
    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / "migrations"))
    # configparser interpolation: a literal % in the password must be doubled
    ac.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    ac.set_main_option("file_template", "%%(rev)s_%%(slug)s")
    return ac


class PersistentContainer(DeclarativeContainer):
    """The relational store holding exams and submissions."""

    config = Configuration()
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    database = config.database.as_(DatabaseSettings)
    credentials = secrets.database.as_(DatabaseSecrets)

    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine, config=database, secrets=credentials, logging=logging
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_config, config=database, secrets=credentials, root=root
    )


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets: Provider[DatabaseSecrets] = Configuration(strict=True)
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, logging=logging, root=root
    )
