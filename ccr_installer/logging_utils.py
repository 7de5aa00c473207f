from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "logs/ccr-installer-build.log"
FALLBACK_LOG_NAME = "ccr-installer-build.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure root logging once: a build log file plus the console.

    If the requested log file cannot be opened (read-only checkout, missing
    permissions) the log goes to ./ccr-installer-build.log instead.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_ccr_installer_configured", False):
        return getattr(logger, "_ccr_installer_log_path", log_path)

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
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_ccr_installer_configured", True)
    setattr(logger, "_ccr_installer_log_path", chosen_path)
    setattr(logger, "_ccr_installer_handlers", handlers)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Detach and close the handlers installed by configure_logging()."""
    logger = logging.getLogger()
    for h in getattr(logger, "_ccr_installer_handlers", []):
        logger.removeHandler(h)
        h.close()
    for attr in ("_ccr_installer_configured", "_ccr_installer_log_path", "_ccr_installer_handlers"):
        if hasattr(logger, attr):
            delattr(logger, attr)
