# configloader/utils/logging_config.py

"""
Configures logging for the configloader package.
Uses Rich for enhanced console logging.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

from configloader.config.durations import format_duration
from configloader.config.models import Configuration
from configloader.version import __version__

# --- Constants ---
# Map verbosity levels to logging levels
VERBOSITY_MAP = {
    0: logging.WARNING,  # Default (normal)
    1: logging.INFO,     # verbose
    2: logging.DEBUG,    # debug
    -1: logging.CRITICAL + 10  # quiet/silent - use a level higher than critical
}
FILE_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)"

# --- Setup Function ---

def setup_logging(
    verbosity: int = 0,
    log_file: Optional[Union[str, Path]] = None,
    config: Optional[Configuration] = None,
) -> logging.Logger:
    """
    Configures the 'configloader' logger.

    Args:
        verbosity: Console verbosity (0 normal, 1 verbose, 2 debug, -1 quiet).
        log_file: Optional path of a file that receives DEBUG and above.
        config: Optional loaded configuration, summarised in the log once set up.

    Returns:
        The configured package logger.
    """
    console_level = VERBOSITY_MAP.get(verbosity, logging.INFO)  # Default to INFO if verbosity is unexpected

    package_logger = logging.getLogger("configloader")
    package_logger.setLevel(logging.DEBUG)  # Handlers filter on their own levels
    package_logger.handlers.clear()  # Allow re-configuration

    # --- Console Handler (Rich) ---
    if console_level <= logging.CRITICAL:  # Only add console handler if not quiet
        console_handler = RichHandler(
            level=console_level,
            show_time=False,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(console_handler)

    # --- File Handler ---
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        package_logger.addHandler(file_handler)

    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())

    init_logger = logging.getLogger("configloader.init")
    init_logger.info(f"configloader v{__version__} logging set up.")
    if config is not None:
        app = config.application
        init_logger.info(f"Application '{app.name}' ({app.environment or 'no environment'}) version {app.version}")
        db = config.database
        init_logger.debug(
            f"Database pool: {db.min_connections}-{db.max_connections} connections, "
            f"life time {format_duration(db.max_connection_life_time)}, "
            f"idle time {format_duration(db.max_connection_idle_time)}, "
            f"health check every {format_duration(db.health_check_period)}"
        )
        init_logger.debug(f"Token duration: {format_duration(config.tokens.duration)}")

    return package_logger
