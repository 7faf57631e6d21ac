import io
import logging
import os

import pytest

from flagrc import (
    ConfigError,
    FlagSet,
    FlagValueError,
    IllegalConfigLineError,
    UnknownOptionError,
    load_config,
    parse_config,
)
from flagrc.config import config_path

log = logging.getLogger(__name__)


@pytest.fixture
def config_flags():
    """Flag set with one int and one string flag"""
    flags = FlagSet('testSuite')
    flags.int('int', 0, 'An int-valued flag')
    flags.string('string', 'STRING', 'A string-valued flag')
    return flags


@pytest.fixture
def home(tmp_path):
    """Empty directory standing in for the user's home"""
    return str(tmp_path)


def test_basic(config_flags):
    parse_config(config_flags, io.StringIO(
        "# this is a comment\n"
        "int = 17\n"
        "\n"
        "string = hello world\n"))
    assert config_flags['int'] == 17
    assert config_flags['string'] == 'hello world'


def test_no_such_flag(config_flags):
    with pytest.raises(UnknownOptionError) as excinfo:
        parse_config(config_flags, io.StringIO("notaflag = 7\n"))
    assert str(excinfo.value) == "unknown option `notaflag'"
    assert excinfo.value.key == 'notaflag'
    assert excinfo.value.lineno == 1


def test_invalid_line(config_flags):
    with pytest.raises(IllegalConfigLineError, match=r"^illegal config line") as excinfo:
        parse_config(config_flags, io.StringIO("# comment\nfoo \n"))
    assert str(excinfo.value) == "illegal config line: `foo'"
    assert excinfo.value.lineno == 2
    assert isinstance(excinfo.value, ConfigError)
    assert isinstance(excinfo.value, ValueError)


def test_invalid_parse(config_flags):
    with pytest.raises(FlagValueError) as excinfo:
        parse_config(config_flags, io.StringIO("int = seventeen\n"))
    assert excinfo.value.name == 'int'
    assert excinfo.value.value == 'seventeen'
    assert config_flags['int'] == 0


def test_whitespace(config_flags):
    parse_config(config_flags, io.StringIO(
        "# this is a comment\n"
        "    int  = 128\n"
        "\n"
        "   \t\t \n"
        "\tstring\t =      value#with spaces\t\t\n"))
    assert config_flags['int'] == 128
    assert config_flags['string'] == 'value#with spaces'


def test_indented_comment(config_flags):
    parse_config(config_flags, io.StringIO("   # int = 5\n"))
    assert config_flags['int'] == 0


def test_value_keeps_later_equals(config_flags):
    parse_config(config_flags, io.StringIO("string = a=b = c\n"))
    assert config_flags['string'] == 'a=b = c'


def test_empty_value(config_flags):
    parse_config(config_flags, io.StringIO("string =\n"))
    assert config_flags['string'] == ''


def test_stops_at_first_error(config_flags):
    """Lines before the bad one stay applied, lines after it are not read"""
    with pytest.raises(IllegalConfigLineError):
        parse_config(config_flags, io.StringIO(
            "int = 5\n"
            "bogus\n"
            "string = never\n"))
    assert config_flags['int'] == 5
    assert config_flags['string'] == 'STRING'


def test_source_recorded(config_flags):
    parse_config(config_flags, io.StringIO("int = 3\n"), source='settings')
    assert config_flags.lookup('int').source == 'settings'
    assert config_flags.lookup('string').source == 'default'


def test_other_flag_sets():
    """Anything with lookup() and set(name, value) can be loaded into"""

    class DictFlags:
        def __init__(self):
            self.values = {'name': None}

        def lookup(self, name):
            return name if name in self.values else None

        def set(self, name, value):
            self.values[name] = value

    flags = DictFlags()
    parse_config(flags, io.StringIO("name = tux\n"))
    assert flags.values == {'name': 'tux'}


def test_config_path():
    assert config_path('toolrc', home='/home/user') == os.path.join('/home/user', '.toolrc')


def test_config_path_defaults_to_home(monkeypatch, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    assert config_path('toolrc') == os.path.join(str(tmp_path), '.toolrc')


def test_load_missing_file(config_flags, home):
    assert load_config(config_flags, 'testrc', home=home) is None
    assert config_flags['int'] == 0
    assert config_flags['string'] == 'STRING'


def test_load_file(config_flags, home):
    path = os.path.join(home, '.testrc')
    with open(path, 'w', encoding='utf-8') as f:
        f.write("int = 42\nstring = héllo\n")
    log.info(f'Created config file: {path}')

    assert load_config(config_flags, 'testrc', home=home) == path
    assert config_flags['int'] == 42
    assert config_flags['string'] == 'héllo'
    assert config_flags.lookup('int').source == path


def test_load_file_from_home(config_flags, monkeypatch, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    (tmp_path / '.testrc').write_text("int = 9\n", encoding='utf-8')

    assert load_config(config_flags, 'testrc') == str(tmp_path / '.testrc')
    assert config_flags['int'] == 9


def test_load_file_errors_propagate(config_flags, home):
    with open(os.path.join(home, '.testrc'), 'w', encoding='utf-8') as f:
        f.write("jobs = 4\n")
    with pytest.raises(UnknownOptionError):
        load_config(config_flags, 'testrc', home=home)


def test_load_unreadable_path(config_flags, home):
    os.mkdir(os.path.join(home, '.testrc'))
    with pytest.raises(OSError):
        load_config(config_flags, 'testrc', home=home)
