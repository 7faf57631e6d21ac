import sys
from pathlib import Path

import pytest

# Make src/ importable without installing the package
src_path = str(Path(__file__).parent.parent / 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from flagrc import FlagSet


@pytest.fixture
def flags():
    """Flag set used by the completion tests"""
    flags = FlagSet('test')
    flags.bool('bool', False, 'bool flag')
    flags.int('int', 0, 'int flag')
    flags.string('str', '', 'string flag')
    flags.string('str1', '', 'string flag 1')
    return flags
