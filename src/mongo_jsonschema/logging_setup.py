"""structlog configuration for mongo-jsonschema."""
import logging

import structlog

from .config import Config


def configure_logging(app_config: Config) -> None:
    """Configures stdlib logging and structlog from the logging section of the config."""
    logging.basicConfig(
        level=getattr(logging, app_config.logging.level.upper(), logging.INFO),
        format="%(message)s",
        force=True
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False) if app_config.logging.format.lower() == "console"
            else structlog.processors.JSONRenderer(sort_keys=True)
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.get_logger(__name__).debug(
        "Logging configured.",
        logging_level=app_config.logging.level,
        logging_format=app_config.logging.format,
    )
