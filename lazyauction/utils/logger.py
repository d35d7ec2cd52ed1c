"""
Centralized logging configuration for LazyAuction.

Colored console output on stderr, with one child logger per subsystem
(auction, escrow, voucher, assets, events).
"""

import logging
import sys

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class AuctionLogger:
    """Owns the `lazyauction` logger tree"""

    _initialized = False

    @classmethod
    def setup(cls, level: int = logging.INFO, force: bool = False):
        """
        Attach a colored console handler to the root `lazyauction` logger.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            force: Reconfigure even if already initialized, so the CLI's
                --debug applies to loggers created at import time
        """
        if cls._initialized and not force:
            return

        root_logger = logging.getLogger("lazyauction")
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        handler = colorlog.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", log_colors=LOG_COLORS))
        root_logger.addHandler(handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"lazyauction.{name}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return AuctionLogger.get_logger(name)


def setup_logging(level: int = logging.INFO):
    """(Re)configure logging, e.g. from the CLI"""
    AuctionLogger.setup(level=level, force=True)
