"""
Console logging for programs using flagrc.

Completion mode writes candidates to stdout, so every diagnostic has to go
to stderr. setup_logging() installs a rich handler there.
"""

import logging
from typing import Any, Dict

DEFAULT_LOGGING: Dict[str, Any] = {
    'level': "INFO",
    'format': "%(message)s",
    'date_format': "[%X]",
    'markup': True,
    'rich_tracebacks': True,
    'show_time': True,
    'show_path': False,
}


def setup_logging(logger: str = 'flagrc', **overrides) -> logging.Logger:
    """
    Attaches a RichHandler writing to stderr to the given logger

    Args:
        logger: Logger name, the library's root logger by default
        **overrides: Any key of DEFAULT_LOGGING

    Returns:
        The configured logger
    """
    from rich.console import Console
    from rich.logging import RichHandler

    options = dict(DEFAULT_LOGGING, **overrides)
    unknown = set(options) - set(DEFAULT_LOGGING)
    if unknown:
        raise ValueError(f"Unknown logging options: {', '.join(sorted(unknown))}")

    handler = RichHandler(
        console=Console(stderr=True),
        markup=options['markup'],
        rich_tracebacks=options['rich_tracebacks'],
        show_time=options['show_time'],
        show_path=options['show_path'],
        log_time_format=options['date_format'],
    )
    handler.setFormatter(logging.Formatter(options['format']))

    log = logging.getLogger(logger)
    for old in [h for h in log.handlers if isinstance(h, RichHandler)]:
        log.removeHandler(old)
    log.addHandler(handler)
    log.setLevel(options['level'])
    return log
