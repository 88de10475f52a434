"""
Logging for the scraper.

Importing the package only creates the 'lenta_scraper' logger; the stdout
handler is installed by setup_logging(), which the CLI calls once at start.
Library users keep control of their own handlers.
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s'
LOG_DATEFMT = '%H:%M:%S'

logger = logging.getLogger('lenta_scraper')
logger.addHandler(logging.NullHandler())

_console = None


def setup_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """
    Install the console handler (once) and set the level.

    Calling it again only switches between INFO and DEBUG.
    """
    global _console
    if _console is None:
        _console = logging.StreamHandler(stream or sys.stdout)
        _console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(_console)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


def get_logger(name):
    """Child logger for a module ("extract", "browser.capture", ...)."""
    return logger.getChild(name)
