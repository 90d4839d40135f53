"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only
configures the root handler once per process.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from prdocumentator.config.models import LogFormat, LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(config: LoggingConfig, console: Console | None = None) -> None:
    """Configure root logging from ``config``.

    Args:
        config: Logging settings
        console: Console for the rich handler (stderr by default)
    """
    level = getattr(logging, config.level.value)

    if config.format == LogFormat.RICH:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        fmt = "%(message)s"
    else:
        handler = logging.StreamHandler()
        fmt = TEXT_FORMAT

    logging.basicConfig(level=level, format=fmt, handlers=[handler], force=True)
    logging.getLogger("prdocumentator").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def mask_token(token: str) -> str:
    """Shorten a secret token for log output."""
    return f"{token[:8]}..."
