# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_handlers: list[logging.Handler] = []


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, debug: bool = False
) -> None:
    """
    Route the package logger to a log file and to stderr.

    The console only shows warnings unless ``debug`` is set; the file gets
    everything at ``level`` and above. Calling this again replaces the
    handlers installed by the previous call.
    """
    root = logging.getLogger("timediary")
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    file_level = logging.getLevelName(level.upper())
    if not isinstance(file_level, int):
        file_level = logging.INFO

    console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    _handlers.append(console_handler)
    root.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError:
            root.warning("cannot open log file %s, logging to the console only", log_file)
        else:
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            _handlers.append(file_handler)
            root.addHandler(file_handler)

    root.setLevel(min(handler.level for handler in _handlers))
    root.propagate = False
