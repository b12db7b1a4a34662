from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "[%(levelname)s] %(message)s"


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Console output is `[INFO] ...` / `[WARN] ...` on stdout and `[ERROR] ...`
    on stderr. The full record, including DEBUG command output, goes to
    log_path; if that location is not writable we fall back to a file in the
    current working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_mango_configured", False):
        return getattr(logger, "_mango_log_path", log_path)

    logging.addLevelName(logging.WARNING, "WARN")

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / "mango-installer.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        out = logging.StreamHandler(sys.stdout)
        out.addFilter(_BelowError())
        err = logging.StreamHandler(sys.stderr)
        err.setLevel(logging.ERROR)
        for h in (out, err):
            h.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
        out.setLevel(level)
        handlers += [out, err]

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_mango_configured", True)
    setattr(logger, "_mango_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
