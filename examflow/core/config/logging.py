"""Typed shape of ``logging.yaml``.

The dump of :class:`LoggingSettings` (by alias) is handed straight to
:func:`logging.config.dictConfig`, so field names and aliases follow that
schema.
"""

import typing as t

import pydantic as p

from .base import BaseSettings

LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class FormatterSettings(BaseSettings):
    factory: t.Literal["examflow.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str = "ext://colorlog.ColoredFormatter"
    format: str
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    no_color: bool = False
    indent: bool = False


class HandlerSettings(BaseSettings):
    class_: t.Literal["colorlog.StreamHandler", "logging.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: str = "ext://sys.stderr"


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] = []


class RootLoggerSettings(BaseSettings):
    level: LogLevel = "WARNING"
    handlers: list[str]


class LoggingSettings(BaseSettings):
    version: t.Literal[1] = 1
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}

    @p.model_validator(mode="after")
    def _references_resolve(self) -> t.Self:
        for name, handler in self.handlers.items():
            if handler.formatter not in self.formatters:
                raise ValueError(f"handler {name!r} uses undefined formatter {handler.formatter!r}")
        for handler_name in self.root.handlers + [h for lg in self.loggers.values() for h in lg.handlers]:
            if handler_name not in self.handlers:
                raise ValueError(f"undefined handler {handler_name!r}")
        return self
