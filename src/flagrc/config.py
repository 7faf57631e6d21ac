"""
Configuration File Module

Loads saved flag values from a plain text rc file, one `key = value` per
line. Blank lines and lines starting with '#' are skipped. Everything after
the first '=' is the value, including any further '=' or '#'.

Example:
    ```python
    from flagrc import FlagSet, load_config

    flags = FlagSet('backup')
    flags.int('jobs', 4)
    flags.string('target', '')

    load_config(flags, 'backuprc')   # reads ~/.backuprc if it exists
    flags.parse(sys.argv[1:])        # command line overrides the rc file
    ```
"""

import logging
import os
from typing import Optional, TextIO

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Base error for malformed configuration files"""

    def __init__(self, message: str, line: str = '', lineno: int = 0):
        self.line = line
        self.lineno = lineno
        super().__init__(message)


class IllegalConfigLineError(ConfigError):
    def __init__(self, line: str, lineno: int = 0):
        super().__init__(f"illegal config line: `{line}'", line, lineno)


class UnknownOptionError(ConfigError):
    def __init__(self, key: str, line: str = '', lineno: int = 0):
        self.key = key
        super().__init__(f"unknown option `{key}'", line, lineno)


def parse_config(flags, stream: TextIO, source: Optional[str] = None) -> None:
    """
    Applies `key = value` lines from a stream to a flag set

    Stops at the first bad line. Flags set by earlier lines keep their new
    values.

    Args:
        flags: Flag set providing lookup() and set()
        stream: Text stream to read lines from
        source: Label recorded as the source of each value. Only passed
                on to flags.set() when given.

    Raises:
        IllegalConfigLineError: A line has no '='
        UnknownOptionError: A key does not name a flag
        ValueError: Whatever the flag set raises for a rejected value
    """
    for lineno, raw in enumerate(stream, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            raise IllegalConfigLineError(line, lineno)
        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip()

        if flags.lookup(key) is None:
            raise UnknownOptionError(key, line, lineno)

        if source is None:
            flags.set(key, value)
        else:
            flags.set(key, value, source=source)


def config_path(basename: str, home: Optional[str] = None) -> str:
    """Returns the rc file path for basename: ~/.basename"""
    if home is None:
        home = os.path.expanduser('~')
    return os.path.join(home, f".{basename}")


def load_config(flags, basename: str, home: Optional[str] = None) -> Optional[str]:
    """
    Loads ~/.basename into a flag set

    A missing file is not an error. Any other problem opening or reading
    the file is raised.

    Args:
        flags: Flag set providing lookup() and set()
        basename: File name without the leading dot
        home: Directory to look in instead of the user's home

    Returns:
        The path that was loaded, or None if there was no file
    """
    path = config_path(basename, home)
    try:
        f = open(path, 'r', encoding='utf-8')
    except FileNotFoundError:
        log.debug(f"No configuration at {path}")
        return None

    with f:
        log.debug(f"Loading configuration from {path}")
        parse_config(flags, f, source=path)
    return path
