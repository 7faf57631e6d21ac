"""
Flag Set Module

A small registry of named, typed command line flags. Each flag knows how to
parse a string into its value, whether it is a boolean switch that takes no
argument, and where its current value came from.

The completion and config modules only rely on three operations:
- lookup(name) -> Flag or None
- set(name, value)
- visit_all(fn), visiting flags in name order

Example:
    ```python
    from flagrc import FlagSet

    flags = FlagSet('backup')
    flags.bool('verbose', False, 'Log every file')
    flags.int('jobs', 4, 'Number of parallel jobs')
    flags.string('target', '', 'Destination directory')

    rest = flags.parse(['-verbose', '--jobs', '8', 'src/'])
    print(flags['jobs'], rest)  # 8 ['src/']
    ```
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

KEY_COLOR = 'wheat1'
SOURCE_COLOR = 'grey30'

log = logging.getLogger(__name__)

_TRUE_STRINGS = ('1', 't', 'true', 'y', 'yes')
_FALSE_STRINGS = ('0', 'f', 'false', 'n', 'no')


class FlagError(ValueError):
    """Base error for flag registration, lookup and parsing"""


class UnknownFlagError(FlagError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"flag provided but not defined: -{name}")


class FlagValueError(FlagError):
    """Raised when a flag's parser rejects a string value"""

    def __init__(self, name: str, value: str, reason: str = ''):
        self.name = name
        self.value = value
        message = f"invalid value {value!r} for flag -{name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError('not a boolean')


@dataclass
class Flag:
    name: str
    usage: str
    default: Any
    value: Any
    parser: Callable[[str], Any]
    is_bool: bool = False
    source: str = 'default'

    def set(self, value: str, source: str = 'runtime') -> None:
        try:
            parsed = self.parser(value)
        except (TypeError, ValueError) as e:
            raise FlagValueError(self.name, value, str(e)) from e
        self.value = parsed
        self.source = source

    @property
    def type_name(self) -> str:
        if self.is_bool:
            return 'bool'
        if self.default is not None:
            return type(self.default).__name__
        return getattr(self.parser, '__name__', 'value')


class FlagSet:
    """
    A named collection of flags.

    Flags are addressed by name without leading dashes. Iteration and
    visit_all() go through flags sorted by name, so completions and the
    table view come out in a stable order.

    Args:
        name (str): Name of the set, usually the program name. Used in logs.
    """

    def __init__(self, name: str = ''):
        self.name = name
        self._flags: Dict[str, Flag] = {}
        self.args: List[str] = []

    def add(self, name: str, default: Any, usage: str = '',
            parser: Callable[[str], Any] = str, is_bool: bool = False) -> Flag:
        """
        Registers a flag

        Args:
            name: Flag name, without dashes
            default: Initial value
            usage: One-line help text
            parser: Converts a string into the flag's value, raising ValueError on bad input
            is_bool: True for switches that take no argument

        Returns:
            The registered Flag
        """
        if not name or name.startswith('-') or '=' in name:
            raise FlagError(f"bad flag name: {name!r}")
        if name in self._flags:
            raise FlagError(f"flag redefined: {name}")
        flag = Flag(name=name, usage=usage, default=default, value=default,
                    parser=parser, is_bool=is_bool)
        self._flags[name] = flag
        return flag

    def bool(self, name: str, default: bool = False, usage: str = '') -> Flag:
        return self.add(name, default, usage, _parse_bool, is_bool=True)

    def int(self, name: str, default: int = 0, usage: str = '') -> Flag:
        return self.add(name, default, usage, int)

    def float(self, name: str, default: float = 0.0, usage: str = '') -> Flag:
        return self.add(name, default, usage, float)

    def string(self, name: str, default: str = '', usage: str = '') -> Flag:
        return self.add(name, default, usage, str)

    def lookup(self, name: str) -> Optional[Flag]:
        return self._flags.get(name)

    def set(self, name: str, value: str, source: str = 'runtime') -> None:
        """Sets a flag from its string form"""
        flag = self._flags.get(name)
        if flag is None:
            raise UnknownFlagError(name)
        flag.set(value, source)
        log.debug(f"{self.name or 'flags'}: -{name} = {flag.value!r} ({source})")

    def visit_all(self, fn: Callable[[Flag], None]) -> None:
        for flag in self:
            fn(flag)

    def __iter__(self) -> Iterator[Flag]:
        return iter([self._flags[name] for name in sorted(self._flags)])

    def __contains__(self, name):
        return name in self._flags

    def __getitem__(self, name: str) -> Any:
        return self._flags[name].value

    def __len__(self):
        return len(self._flags)

    def as_dict(self) -> Dict[str, Any]:
        return {flag.name: flag.value for flag in self}

    def parse(self, args: List[str], source: str = 'command line') -> List[str]:
        """
        Parses flags from the head of args

        Parsing stops at the first positional argument or right after a
        '--' terminator. A lone '-' counts as positional.

        Args:
            args: Arguments without the program name

        Returns:
            The remaining positional arguments (also kept in self.args)
        """
        args = list(args)
        while args:
            arg = args[0]
            if len(arg) < 2 or not arg.startswith('-'):
                break
            args.pop(0)
            if arg == '--':
                break

            name = arg.lstrip('-')
            value = None
            if '=' in name:
                name, value = name.split('=', 1)
            if not name:
                raise FlagError(f"bad flag syntax: {arg}")

            flag = self._flags.get(name)
            if flag is None:
                raise UnknownFlagError(name)
            if flag.is_bool:
                self.set(name, 'true' if value is None else value, source)
                continue
            if value is None:
                if not args:
                    raise FlagError(f"flag needs an argument: -{name}")
                value = args.pop(0)
            self.set(name, value, source)

        self.args = args
        return args

    def format_flags(self) -> str:
        """
        Prints the flags as a table and returns the rendered text.

        Returns:
            str: Tabular representation of the flags
        """
        try:
            from rich.console import Console
            from rich.table import Table
        except ImportError:
            raise ImportError("To use format_flags, you need to install 'rich' (pip install rich)")

        console = Console(record=True)
        table = Table(title=self.name or None, show_header=True, header_style="bold magenta")
        table.add_column("Flag", style=KEY_COLOR)
        table.add_column("Value", style="green")
        table.add_column("Type", style="blue")
        table.add_column("Source", style=SOURCE_COLOR)
        table.add_column("Usage")

        for flag in self:
            table.add_row(f"-{flag.name}", str(flag.value), flag.type_name, flag.source, flag.usage)

        console.print(table)
        return console.export_text()
