"""
Console logging setup built on rich.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "essurvey"


def setup_logging(
    level: "int | str" = "INFO", console: Optional[Console] = None
) -> logging.Logger:
    """
    Sends the package's log records to the console through a RichHandler.

    Calling it again replaces the previous handler instead of adding another.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(log.handlers):
        if isinstance(handler, RichHandler):
            log.removeHandler(handler)

    log.addHandler(
        RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    )
    log.setLevel(level)
    return log
