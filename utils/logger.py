"""Logging configuration."""
import logging
from pathlib import Path

from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level="INFO", log_file=None):
    """Configure the ``mtmonitor`` logger with a rich console handler and optional file."""
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root = logging.getLogger("mtmonitor")
    root.setLevel(numeric_level)

    if not root.handlers:
        console_handler = RichHandler(level=numeric_level, rich_tracebacks=True, markup=False,
                                      show_path=False)
        root.addHandler(console_handler)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            root.addHandler(file_handler)
    else:
        for handler in root.handlers:
            handler.setLevel(numeric_level)

    # requests' connection pool chatter is only useful when debugging
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))
    return root
