import logging
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from examflow.lib.json import JSONEncoder, JSONValue

from .style import LogStyle

# attributes every LogRecord carries, plus those added while formatting
ReservedKeys = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "log_color", "reset"}


class RecordJSONEncoder(JSONEncoder):
    """Log records must always format; anything unencodable is shown by its repr."""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)


class ExtraFormatter(logging.Formatter):
    """Formats with a base formatter, then appends the record's ``extra`` fields as JSON.

    Configured from ``logging.yaml``::

        console:
          "()": examflow.lib.logging.ExtraFormatter
          base: ext://colorlog.ColoredFormatter
          format: "%(log_color)s%(levelname)-8s%(reset)s %(message)s"

    Keyword arguments other than those below go to the base formatter. The
    JSON is highlighted with pygments when the handler writes to a terminal,
    unless ``no_color`` is set. Continuation lines of a multi-line message are
    indented to line up under its first line.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool | None = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, **kwargs)
        self.indent = 4 if indent else None
        self.no_color = bool(kwargs.get("no_color", False))
        self.pyg_style = pyg_style

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if "\n" in message:
            self.align_continuation(record, message)
        formatted = self.base.format(record)

        extra = self.extra_fields(record)
        if not extra:
            return formatted
        return f"{formatted} {self.render(extra, record)}"

    def align_continuation(self, record: logging.LogRecord, message: str) -> None:
        first, rest = message.split("\n", 1)
        record.msg, record.args = first, None
        lead = self.base.format(record)
        # strip terminal escapes before measuring the prefix
        width = len("".join(c for c in lead[: lead.rfind(first)] if c.isprintable()))
        record.msg = first + "\n" + textwrap.indent(rest, " " * width)

    def extra_fields(self, record: logging.LogRecord) -> dict[str, t.Any]:
        return {k: v for k, v in record.__dict__.items() if k not in ReservedKeys}

    def render(self, extra: dict[str, t.Any], record: logging.LogRecord) -> str:
        js = RecordJSONEncoder(sort_keys=True, indent=self.indent).encode(extra)
        if self.no_color or not self.is_tty(record):
            return js
        hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
        return hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style), None).strip()

    def is_tty(self, record: logging.LogRecord) -> bool:
        logger: logging.Logger | None = logging.getLogger(record.name)
        while logger is not None:
            for handler in logger.handlers:
                if handler.formatter is self:
                    isatty = getattr(getattr(handler, "stream", None), "isatty", None)
                    return bool(isatty and isatty())
            logger = logger.parent if logger.propagate else None
        return False

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
