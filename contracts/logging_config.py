"""
Logging setup shared by the build script and the coordinator.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from contracts.config import LOG_LEVEL


def setup_logging(level: Optional[str] = None, use_rich: bool = True) -> None:
    """
    Install a single handler on the root logger.

    Args:
        level: Log level name; falls back to RPS_LOG_LEVEL
        use_rich: Colored RichHandler output instead of a plain stream handler
    """
    numeric_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if use_rich:
        handler = RichHandler(
            console=Console(file=sys.stderr),
            level=numeric_level,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)-5s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))

    root_logger.addHandler(handler)

    # algosdk / urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
