import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

from rich.console import Console
from rich.logging import RichHandler

from .config import Config

LOG_FILE_NAME = "howto-cli.log"

# Handlers installed by the last setup_logging() call
_installed_handlers: List[logging.Handler] = []


def _remove_installed_handlers(root_logger: logging.Logger) -> None:
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def setup_logging(config: Config) -> None:
    """
    Set up logging for the application.

    Safe to call more than once: handlers from a previous call are replaced.
    Nothing is ever logged to stdout.
    """
    root_logger = logging.getLogger()
    _remove_installed_handlers(root_logger)
    root_logger.setLevel(logging.INFO if config.verbose else logging.WARNING)

    # Console handler (with Rich), on stderr so stdout stays pipeable
    console = Console(stderr=True)
    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True
    )
    root_logger.addHandler(rich_handler)
    _installed_handlers.append(rich_handler)

    # Quieten the HTTP stack unless something goes wrong
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)

    try:
        os.makedirs(config.log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(config.log_dir, LOG_FILE_NAME), maxBytes=1024*1024, backupCount=3  # 1 MB per file, 3 backups
        )
    except OSError as e:
        logger.warning(f"File logging disabled, cannot write to {config.log_dir}: {e}")
        return

    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)
    _installed_handlers.append(file_handler)

    logger.info(f"Logger initialized. Logs will be stored in {config.log_dir}")
