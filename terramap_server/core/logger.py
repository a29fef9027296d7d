"""
Server logging: every logger writes through one rich console so request,
world cache and player probe messages share a single timeline.
"""

import logging
from rich.logging import RichHandler
from rich.console import Console
from rich.theme import Theme

console = Console(theme=Theme({
    "logging.level.debug": "cyan",
    "logging.level.info": "bold #FFFFFF on #61AD00",
    "logging.level.warning": "bold #FFFFFF on #DB6900",
    "logging.level.error": "bold #FFFFFF on #d70000",
}))

_loggers: list[logging.Logger] = []

def _make_handler() -> RichHandler:
    # Messages may contain player names and file paths; never parse them as markup
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=False,
        markup=False
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler

def setup_logger(name: str = "TerraMap") -> logging.Logger:
    """Return the named logger, attaching the rich handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_make_handler())
        logger.setLevel(logging.INFO)
    logger.propagate = False

    if logger not in _loggers:
        _loggers.append(logger)
    return logger

def set_debug_mode(enabled: bool):
    """Toggle DEBUG level for all registered loggers."""
    level = logging.DEBUG if enabled else logging.INFO
    for logger in _loggers:
        logger.setLevel(level)
