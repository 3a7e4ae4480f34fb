"""Logger setup shared by the CLI and the HTTP service.

Everything logs under the ``repohealth`` hierarchy. The console handler is
replaced on every :func:`configure_logging` call; file sinks come from the
``--log-file`` option or ``logging.file`` in ``.repohealth.yml`` and are
attached once per path.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "repohealth"
CONSOLE_FORMAT = "[repohealth] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``repohealth.<name>`` (or the root project logger)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Reset the project logger to a single console handler.

    ``verbose`` wins over ``quiet``. Report output goes to stdout, so the
    console handler writes to stderr and never mixes with it.
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        add_file_handler(log_file)
    return logger


def add_file_handler(path: Path) -> Path:
    """Append log records to ``path``; repeated calls for one path are no-ops."""
    target = Path(path).expanduser().resolve()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == target:
            return target

    target.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(target, encoding="utf-8")
    # Files keep debug detail even when the console is quiet.
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(file_handler)
    # Console handlers carry their own level, so lowering the logger only feeds the file.
    if logger.level == logging.NOTSET or logger.level > logging.DEBUG:
        logger.setLevel(logging.DEBUG)
    return target


__all__ = [
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
    "ROOT_LOGGER",
    "add_file_handler",
    "configure_logging",
    "get_logger",
]
