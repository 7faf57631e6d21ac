"""
Programmable Tab Completion Module

Lets a program implement its own bash tab completion in Python, next to its
normal flag handling. The program is registered with bash through
`complete -C`, and bash re-runs it with a marker argument whenever the user
presses TAB. The partial command line arrives in the COMP_LINE and
COMP_POINT environment variables.

Example:
    ```python
    import sys
    from flagrc import FlagSet, SetCompleter, completer_with_flags, complete_if_requested

    flags = FlagSet('deploy')
    flags.bool('dry-run', False, 'Print actions only')
    flags.string('region', 'eu', 'Target region')

    complete_if_requested(completer_with_flags(flags, SetCompleter(['staging', 'production'])))
    rest = flags.parse(sys.argv[1:])
    ```

    and in ~/.bashrc:

    ```bash
    complete -C 'deploy -do-completion' deploy
    ```
"""

import logging
import os
import sys
from typing import Callable, Iterable, List, Mapping, Optional, TextIO, Tuple, Union

log = logging.getLogger(__name__)

COMPLETION_MARKER = '-do-completion'
COMP_LINE_VAR = 'COMP_LINE'
COMP_POINT_VAR = 'COMP_POINT'


class CommandLine(list):
    """
    Words of a command line being completed, up to and including the word
    under the cursor. The cursor always sits at the end of the last word.
    By convention the program name is not included.
    """

    @property
    def current_word(self) -> str:
        return self[-1]


class Completer:
    """Produces candidates for the last word of a CommandLine"""

    def complete(self, command_line: CommandLine) -> List[str]:
        raise NotImplementedError


class FunctionCompleter(Completer):
    def __init__(self, fn: Callable[[CommandLine], Optional[Iterable[str]]]):
        self.fn = fn

    def complete(self, command_line: CommandLine) -> List[str]:
        return list(self.fn(command_line) or [])


class SetCompleter(Completer):
    """Completes from a fixed list of words, keeping their order"""

    def __init__(self, words: Iterable[str]):
        self.words = list(words)

    def complete(self, command_line: CommandLine) -> List[str]:
        prefix = command_line.current_word
        return [word for word in self.words if word.startswith(prefix)]


class FlagCompleter(Completer):
    """
    Wraps a completer with knowledge of a flag set.

    If the current word is a flag, completes flag names. If it is a flag's
    value, offers nothing. If it is empty and no positional word has been
    typed yet, offers every flag followed by whatever the inner completer
    returns. Otherwise the inner completer sees the command line from the
    first positional word on.
    """

    def __init__(self, flags, inner: Completer):
        self.flags = flags
        self.inner = inner

    def complete(self, command_line: CommandLine) -> List[str]:
        completions, rest = complete_flags(command_line, self.flags)
        if rest is not None:
            completions.extend(self.inner.complete(rest) or [])
        return completions


CompleterLike = Union[Completer, Callable[[CommandLine], Optional[Iterable[str]]]]


def _as_completer(completer: CompleterLike) -> Completer:
    if isinstance(completer, Completer):
        return completer
    if callable(completer):
        return FunctionCompleter(completer)
    raise TypeError(f"Expected a Completer or a callable, got {type(completer).__name__}")


def completer_with_flags(flags, completer: CompleterLike) -> Completer:
    """Makes a completer flag-aware for the given flag set"""
    return FlagCompleter(flags, _as_completer(completer))


def parse_line_for_completion(line: str, point: int) -> CommandLine:
    """
    Splits line[:point] into words the way bash would see them.

    Quotes and backslashes are kept in the words. An unterminated quote is
    not an error. The word under the cursor is always the last element and
    is empty when the cursor follows whitespace.

    Args:
        line: Full command line
        point: Cursor offset into line

    Returns:
        CommandLine with at least one element
    """
    command_line = CommandLine()
    quote = ''
    backslash = False
    word: List[str] = []

    for char in line[:point]:
        if backslash:
            word.append(char)
            backslash = False
            continue
        if char == '\\':
            word.append(char)
            backslash = True
            continue

        if not quote:
            if char in ('\'', '"'):
                word.append(char)
                quote = char
            elif char in (' ', '\t'):
                if word:
                    command_line.append(''.join(word))
                word = []
            else:
                word.append(char)
        else:
            word.append(char)
            if char == quote:
                quote = ''

    command_line.append(''.join(word))
    return command_line


def _is_bool_flag(flag) -> bool:
    return bool(getattr(flag, 'is_bool', False))


def _flag_names(flags) -> List[str]:
    names = []
    flags.visit_all(lambda flag: names.append(flag.name))
    return names


def complete_flags(command_line: CommandLine, flags) -> Tuple[List[str], Optional[CommandLine]]:
    """
    Completes flags at the head of a command line.

    Args:
        command_line: Words to complete, without the program name
        flags: Flag set providing lookup() and visit_all()

    Returns:
        (completions, rest) where rest is the part of the command line the
        inner completer should see, or None if it should not be called
    """
    if not command_line:
        return [], command_line

    in_flag = ''
    start = 0
    while len(command_line) - start > 1:
        word = command_line[start]
        if in_flag:
            in_flag = ''
        elif len(word) > 1 and word.startswith('-') and word != '--':
            if '=' not in word:
                in_flag = word.lstrip('-')
            flag = flags.lookup(in_flag) if in_flag else None
            if flag is not None and _is_bool_flag(flag):
                in_flag = ''
        else:
            if word == '--':
                start += 1
            return [], CommandLine(command_line[start:])
        start += 1

    current = command_line[start]
    if in_flag:
        # flag values are not completed
        return [], None
    if current.startswith('-'):
        prefix = current.lstrip('-')
        return [f"-{name}" for name in _flag_names(flags) if name.startswith(prefix)], None

    completions = []
    if current == '':
        completions = [f"-{name}" for name in _flag_names(flags)]
    return completions, CommandLine(command_line[start:])


def run_completion(completer: CompleterLike,
                   argv: Optional[List[str]] = None,
                   environ: Optional[Mapping[str, str]] = None,
                   stdout: Optional[TextIO] = None,
                   marker: str = COMPLETION_MARKER,
                   line_var: str = COMP_LINE_VAR,
                   point_var: str = COMP_POINT_VAR) -> Optional[int]:
    """
    Runs completion if the program was invoked in completion mode.

    Args:
        completer: Completer (or plain function) for the whole command line
        argv: Program arguments, sys.argv by default
        environ: Environment, os.environ by default
        stdout: Where candidates are written, sys.stdout by default
        marker: Argument that switches on completion mode

    Returns:
        None when completion was not requested, otherwise the exit status
    """
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ
    stdout = sys.stdout if stdout is None else stdout

    if len(argv) <= 1 or argv[1] != marker:
        return None

    line = environ.get(line_var, '')
    point_str = environ.get(point_var, '')
    if not line or not point_str:
        log.error(f"Completion requested, but {line_var} and/or {point_var} unset.")
        return 1

    try:
        point = int(point_str)
    except ValueError:
        log.error(f"Invalid {point_var}: {point_str!r}")
        return 1
    if not 0 <= point <= len(line):
        log.error(f"Invalid {point_var}: {point} is outside of {line_var} ({len(line)} characters)")
        return 1

    command_line = CommandLine(parse_line_for_completion(line, point)[1:])
    if not command_line:
        # cursor is still on the program name
        return 0
    candidates = _as_completer(completer).complete(command_line) or []
    log.debug(f"Completing {command_line!r}: {len(candidates)} candidates")
    for candidate in candidates:
        stdout.write(f"{candidate}\n")
    stdout.flush()
    return 0


def complete_if_requested(completer: CompleterLike,
                          exit: Callable[[int], None] = sys.exit,
                          **kwargs) -> None:
    """
    Entry point for completion, to be called early in main().

    If the program was started with the completion marker, prints the
    candidates for COMP_LINE/COMP_POINT and calls exit() with the status.
    Otherwise returns without doing anything.

    Keyword arguments are passed on to run_completion().
    """
    status = run_completion(completer, **kwargs)
    if status is not None:
        exit(status)


def bash_completion_script(prog: str, marker: str = COMPLETION_MARKER) -> str:
    """Returns the bash line that hooks prog up to its completion mode"""
    return f"complete -C '{prog} {marker}' {prog}"
