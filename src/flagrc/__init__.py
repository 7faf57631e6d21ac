"""
flagrc - tab completion and rc files for flag-based command line programs
"""

from .completion import (
    CommandLine,
    Completer,
    FlagCompleter,
    FunctionCompleter,
    SetCompleter,
    bash_completion_script,
    complete_flags,
    complete_if_requested,
    completer_with_flags,
    parse_line_for_completion,
    run_completion,
)
from .config import ConfigError, IllegalConfigLineError, UnknownOptionError, load_config, parse_config
from .flags import Flag, FlagError, FlagSet, FlagValueError, UnknownFlagError
from .logsetup import setup_logging

__version__ = "0.1.0"
__all__ = [
    "CommandLine",
    "Completer",
    "FlagCompleter",
    "FunctionCompleter",
    "SetCompleter",
    "bash_completion_script",
    "complete_flags",
    "complete_if_requested",
    "completer_with_flags",
    "parse_line_for_completion",
    "run_completion",
    "ConfigError",
    "IllegalConfigLineError",
    "UnknownOptionError",
    "load_config",
    "parse_config",
    "Flag",
    "FlagError",
    "FlagSet",
    "FlagValueError",
    "UnknownFlagError",
    "setup_logging",
]
