import logging

from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> None:
    """Konsolen-Logging über rich (Zeit, Level, Modul)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        level=level,
        show_path=False,
        rich_tracebacks=True,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    root_logger.addHandler(handler)
