import json
import logging
import re
import sys
import textwrap
import typing as t

import colorlog
import pygments
from pydantic_core import to_jsonable_python
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from .style import LogStyle

_ansi = re.compile(r"\x1b\[[0-9;]*m")

# attributes every LogRecord carries; anything else arrived through extra={...}
_standard = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "color_message"}


def _jsonable(o: t.Any) -> t.Any:
    return to_jsonable_python(o, fallback=repr)


def extras(record: logging.LogRecord) -> dict[str, t.Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _standard}


class ExtraFormatter(logging.Formatter):
    """Formats with ``base``, then appends the record's extras as JSON.

    On a terminal the JSON is highlighted with pygments, unless ``no_color``
    is set. Continuation lines of a multi-line message are indented to line up
    under its first line.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool = True,
        no_color: bool = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        **kwargs: t.Any,
    ):
        if issubclass(base, colorlog.ColoredFormatter):
            kwargs["no_color"] = no_color
        self.base = base(format, datefmt=datefmt, style=style, **kwargs)
        self.indent = indent
        self.highlight = not no_color and sys.stderr.isatty()
        self.pyg_style = pyg_style

    def _align(self, record: logging.LogRecord) -> None:
        first, *rest = record.getMessage().splitlines()
        probe = logging.makeLogRecord({
            **record.__dict__,
            "msg": "\0",
            "args": None,
            "exc_info": None,
            "exc_text": None,
            "stack_info": None,
        })
        head = _ansi.sub("", self.base.format(probe)).split("\0", 1)[0].rsplit("\n", 1)[-1]
        record.msg = first + "\n" + textwrap.indent("\n".join(rest), " " * len(head))
        record.args = None

    def format(self, record: logging.LogRecord) -> str:
        if "\n" in record.getMessage():
            self._align(record)
        message = self.base.format(record)

        fields = extras(record)
        if not fields:
            return message

        js = json.dumps(fields, sort_keys=True, indent=4 if self.indent else None, default=_jsonable)
        if self.highlight:
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style))
        return f"{message} {js.strip()}"

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
