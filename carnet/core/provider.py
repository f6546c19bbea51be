import datetime
import inspect
import logging
import logging.config
import typing as t

TimestampProvider = t.Callable[..., datetime.datetime]

TRACE = 5


class TraceLogLevelLogger(logging.Logger):
    def trace(self, message: str, *args: t.Any, **kwargs: t.Any) -> None:
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class LoggingProvider(object):
    """Owns the process's logging configuration while the container runs."""

    def __init__(self, config: dict[str, t.Any], debug: bool):
        # register TRACE first so that dictConfig accepts it as a level
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")
        logging.config.dictConfig(config)
        self.capture_warnings(debug)

    @staticmethod
    def get_logger(name: str | None = None) -> TraceLogLevelLogger:
        """The named logger, or that of the calling module."""
        if name is None:
            caller = inspect.currentframe()
            assert caller is not None and caller.f_back is not None
            name = caller.f_back.f_globals["__name__"]
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool) -> None:
        logging.captureWarnings(capture)


def provide_logging(config: dict[str, t.Any], debug: bool) -> t.Iterator[LoggingProvider]:
    yield LoggingProvider(config, debug)
    logging.captureWarnings(False)
