"""Logging setup for pindar."""

from __future__ import annotations

import logging


# Third-party loggers that are only interesting when debugging.
_NOISY_LOGGERS = ("openai", "httpx", "httpcore")


def configure_logging(verbose: bool = False) -> None:
    """Configure application logging.

    Args:
        verbose: When True, sets the log level to DEBUG. Otherwise WARNING.
    """

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)
