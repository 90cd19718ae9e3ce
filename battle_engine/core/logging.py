"""
Logging configuration module for the battle engine.

Diagnostic logging only: the player-facing battle log is part of the battle
state and is printed by the console front end, not through `logging`.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "battle_engine"


def setup_logging(level: int = logging.INFO, show_time: bool = False) -> RichHandler:
    """
    Routes diagnostic logging to stderr through a rich handler.

    Stdout is left to the battle itself, so prompts and log entries are never
    interleaved with diagnostics.

    Args:
        level (int): The root logging level. Defaults to logging.INFO.
        show_time (bool): Whether to prefix records with a timestamp.

    Returns:
        RichHandler: The installed handler.

    """
    console = Console(width=120, stderr=True, force_jupyter=False)

    rich_handler = RichHandler(
        console=console,
        show_time=show_time,
        show_level=True,
        show_path=False,
        # Battle entries may contain brackets, never parse them as markup.
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))

    logging.basicConfig(level=level, handlers=[rich_handler], force=True)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    return rich_handler


def get_logger(name: str) -> logging.Logger:
    """
    Gets a logger under the `battle_engine` namespace.

    Args:
        name (str): A module name, with or without the package prefix.

    Returns:
        logging.Logger: The logger instance.

    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
