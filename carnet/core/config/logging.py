"""Schema of the ``logging`` section: a ``logging.config.dictConfig`` document."""

import pathlib
import typing as t

import pydantic as p

from .base import BaseSettings

# the stock level names, plus TRACE which LoggingProvider registers
LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class ExtraFormatterSettings(BaseSettings):
    factory: t.Literal["carnet.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str
    format: str | None = None
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    no_color: bool = False
    indent: bool = True


class PlainFormatterSettings(BaseSettings):
    factory: t.Literal["logging.Formatter"] = p.Field(alias="()")
    fmt: str | None = None
    datefmt: str | None = None


FormatterSettings = t.Annotated[ExtraFormatterSettings | PlainFormatterSettings, p.Field(discriminator="factory")]


class StreamHandlerSettings(BaseSettings):
    class_: t.Literal["colorlog.StreamHandler", "logging.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel
    stream: str = "ext://sys.stderr"


class TimedRotatingFileHandlerSettings(BaseSettings):
    class_: t.Literal["logging.handlers.TimedRotatingFileHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel
    filename: pathlib.Path
    when: str = "midnight"
    backupCount: int = 7


HandlerSettings = t.Annotated[
    StreamHandlerSettings | TimedRotatingFileHandlerSettings,
    p.Field(discriminator="class_"),
]


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class RootLoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    handlers: list[str]


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}

    @p.model_validator(mode="after")
    def check_references(self) -> t.Self:
        # dictConfig would only notice these once it is half-applied
        for name, handler in self.handlers.items():
            if handler.formatter not in self.formatters:
                raise ValueError(f"handler {name!r} uses unknown formatter {handler.formatter!r}")
        used = {"root": self.root.handlers} | {k: v.handlers or [] for k, v in self.loggers.items()}
        for logger, handlers in used.items():
            if missing := set(handlers) - set(self.handlers):
                raise ValueError(f"logger {logger!r} uses unknown handlers {sorted(missing)}")
        return self
