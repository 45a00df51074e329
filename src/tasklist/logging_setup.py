from __future__ import annotations

import logging
import sys

_PACKAGE_LOGGER = __name__.rpartition(".")[0]


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stderr handler to the package logger and set its level.

    Safe to call more than once: the handler is only added the first time.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)

    if not any(getattr(h, "_tasklist_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handler._tasklist_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
