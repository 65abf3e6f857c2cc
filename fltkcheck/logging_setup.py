"""
fltk-check Logging — Diagnostic log output for troubleshooting the checks.

Check results go to stdout through the reporter; log records (subprocess
command lines, exit codes, cleanup) go to stderr so the two never mix.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fltkcheck"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Install a stderr handler on the package logger.

    Args:
        verbose: Emit DEBUG records (every command the prober runs);
            otherwise only warnings and errors are shown.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Re-running main() in one process must not stack handlers
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        show_time=verbose,
        markup=False,
        log_time_format="%H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
