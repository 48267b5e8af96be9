import datetime
import inspect
import logging
import logging.config
import typing as t

TimestampProvider = t.Callable[[], datetime.datetime]

TRACE = 5


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class TraceLogger(logging.Logger):
    """Logger with a ``trace`` level below DEBUG."""

    def trace(self, msg: str, *args: t.Any, **kwargs: t.Any) -> None:
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


class LoggingProvider(object):
    """Applies the validated ``logging`` settings; held by the container as a resource."""

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.addLevelName(TRACE, "TRACE")
        logging.setLoggerClass(TraceLogger)
        logging.config.dictConfig(config)
        logging.captureWarnings(debug)

    @staticmethod
    def get_logger(name: str | None = None) -> TraceLogger:
        """Logger named ``name``, or after the calling module when omitted."""
        if name is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            name = caller.f_globals["__name__"] if caller is not None else "examflow"
        return t.cast(TraceLogger, logging.getLogger(name))
