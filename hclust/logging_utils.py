"""Colored, filtered console logging plus a verbose rotating log file."""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from hclust.config import get_logging_settings


class Colors:
    """ANSI color codes."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


class ColoredFormatter(logging.Formatter):
    """A logging formatter that adds colors to the output."""

    LOG_LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        color = self.LOG_LEVEL_COLORS.get(record.levelno)
        message = super().format(record)
        if color:
            # Color the whole line
            return color + message + Colors.RESET
        return message


class ConsoleFilter(logging.Filter):
    """Lets warnings through, plus run summaries from the clustering modules."""

    SUMMARY_PATTERNS = (
        "Computing",
        "Linkage complete",
        "Cut ",
    )

    def filter(self, record):
        # Always allow warnings and above
        if record.levelno >= logging.WARNING:
            return True

        if record.levelno == logging.INFO and record.name.startswith("hclust."):
            msg = record.getMessage()
            return any(msg.startswith(pattern) for pattern in self.SUMMARY_PATTERNS)

        return False


def setup_clustering_logging(
    console_level: Optional[int] = None,
    file_level=logging.DEBUG,
    quiet=False,
    log_dir: Optional[Path] = None,
):
    """
    Set up logging with a colored, filtered console handler and a verbose
    file handler. Level and directory default to the environment settings.
    """
    settings = get_logging_settings()
    console_level = settings.level if console_level is None else console_level
    log_dir = Path(log_dir) if log_dir is not None else settings.log_dir

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler (colored and filtered)
    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)

        console_formatter = ColoredFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        )
        console_handler.setFormatter(console_formatter)
        console_handler.addFilter(ConsoleFilter())
        root_logger.addHandler(console_handler)

    # File handler (verbose)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "hclust.log"

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=5
    )
    file_handler.setLevel(file_level)
    file_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info("Colored and filtered logging initialized.")
    return log_file
