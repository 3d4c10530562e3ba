import logging
import logging.handlers
import sys

import structlog
from structlog.typing import Processor

from infrastructure.config import Settings, settings

# Chatty at INFO while a model downloads or loads
_QUIET_LOGGERS = ("sentence_transformers", "httpx", "urllib3", "filelock")

_SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def _renderer(config: Settings) -> Processor:
    if config.app_env == "development":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _handlers(config: Settings, formatter: logging.Formatter) -> list[logging.Handler]:
    config.log_dir.mkdir(parents=True, exist_ok=True)

    to_stdout = logging.StreamHandler(sys.stdout)
    to_file = logging.handlers.TimedRotatingFileHandler(
        config.log_dir / f"{config.app_env}.log",
        when="midnight",
        backupCount=7,
        encoding="utf-8",
    )
    for handler in (to_stdout, to_file):
        handler.setFormatter(formatter)
    return [to_stdout, to_file]


def setup_logging(config: Settings = settings) -> None:
    """Route structlog and stdlib logging through one renderer.

    Safe to call more than once: root handlers are replaced, not appended.
    Every record carries the app name and cache root.
    """
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(app=config.app_name, cache_root=str(config.cache_root))

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(_SHARED_PROCESSORS),
        processor=_renderer(config),
    )

    root_logger = logging.getLogger()
    root_logger.handlers = _handlers(config, formatter)
    root_logger.setLevel(config.log_level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
