import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure the root logger for CLI runs

    Args:
        level: Minimum level written to stderr

    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # One console handler, even when main() runs repeatedly in-process
    for handler in list(root_logger.handlers):
        if getattr(handler, "_notebook_dashboard", False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._notebook_dashboard = True
    root_logger.addHandler(console_handler)
