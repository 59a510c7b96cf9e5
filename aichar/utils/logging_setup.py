"""Logging configuration for applications embedding aichar."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False, log_file: Optional[Union[str, Path]] = None) -> Optional[logging.FileHandler]:
    """
    Configure logging.

    Args:
        debug: Log aichar at DEBUG instead of INFO
        log_file: Also write DEBUG output to this file

    Returns:
        The file handler, if one was added
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    file_handler = None
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    # Root stays at INFO so third-party libraries don't flood the output
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    logging.getLogger('aichar').setLevel(logging.DEBUG if debug else logging.INFO)

    # Pillow logs every chunk it reads at DEBUG
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return file_handler
