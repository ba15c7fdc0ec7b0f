"""Structured logging configuration with app and article output streams."""

import logging
import logging.handlers
from pathlib import Path

import structlog

from finscrape.config import LoggingConfig

ARTICLE_LOGGER = "finscrape.articles"


def configure_logging(config: LoggingConfig) -> None:
    """Set up structured logging with console + file outputs."""
    for log_path in [config.app_log, config.article_log]:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    # Shared structlog processors
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # JSON formatter for file output
    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Playwright's driver and asyncio chatter drown out cycle events at DEBUG
    for noisy_logger in ["asyncio", "playwright"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    app_handler = logging.handlers.RotatingFileHandler(
        config.app_log,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    app_handler.setFormatter(json_formatter)
    root_logger.addHandler(app_handler)

    # Article log handler (separate logger)
    article_logger = logging.getLogger(ARTICLE_LOGGER)
    article_handler = logging.handlers.RotatingFileHandler(
        config.article_log,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    article_handler.setFormatter(json_formatter)
    article_logger.addHandler(article_handler)
    article_logger.propagate = True


def get_article_logger() -> structlog.stdlib.BoundLogger:
    """Get the logger that records every emitted article."""
    return structlog.get_logger(ARTICLE_LOGGER)
