from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseSettings

Driver = t.Literal["postgresql+psycopg", "sqlite+pysqlite"]


class DatabaseSettings(BaseSettings):
    """Relational store for exams and submissions.

    PostgreSQL in deployment. With the SQLite driver `database` is a file
    path or ``:memory:``, and `host` and `port` are ignored.
    """

    driver: Driver = "postgresql+psycopg"
    database: str
    host: p.IPvAnyAddress | str | None = None
    port: t.Annotated[int, p.Field(gt=0, lt=65536)] | None = 5432
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")

    @p.model_validator(mode="after")
    def _server_has_host(self) -> t.Self:
        if not self.is_sqlite and self.host is None:
            raise ValueError(f"{self.driver} needs a host")
        return self


class PersistentSettings(BaseSettings):
    database: DatabaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings
