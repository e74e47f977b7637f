from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/iso-chooser-menu.log"
SYSLOG_SOCKET = "/dev/log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    use_syslog: bool = True,
    console_level: int = logging.WARNING,
) -> str:
    """Configure logging.

    The menu owns the terminal while it runs, so the console handler only
    reports warnings and errors; those are emitted before curses starts or
    after it has been torn down. Everything else goes to the log file and,
    when available, syslog.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_iso_chooser_configured", False):
        return getattr(logger, "_iso_chooser_log_path", log_path)

    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        # Live installer environments may not allow writing to /var/log.
        chosen_path = str(Path.cwd() / "iso-chooser-menu.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if use_syslog and os.path.exists(SYSLOG_SOCKET):
        syslog = logging.handlers.SysLogHandler(address=SYSLOG_SOCKET)
        syslog.setFormatter(logging.Formatter("iso-chooser-menu: %(levelname)s %(message)s"))
        handlers.append(syslog)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(fmt)
    handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_iso_chooser_configured", True)
    setattr(logger, "_iso_chooser_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
