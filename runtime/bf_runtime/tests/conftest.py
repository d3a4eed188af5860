"""
Pytest configuration and fixtures for bf_runtime tests.
"""

import os
import sys

import pytest

# Add grandparent directory to path for imports (to find bf_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from bf_runtime.channels import BufferSink  # noqa: E402


# Prints "Hello World!\n"
HELLO_WORLD = (
    b"++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++."
    b">>.<-.<.+++.------.--------.>>+.>++."
)


@pytest.fixture
def sink():
    """Fresh in-memory output sink"""
    return BufferSink()


@pytest.fixture
def hello_world():
    return HELLO_WORLD


@pytest.fixture
def program_file(tmp_path):
    """Write program text to a temporary file and return its path"""
    def _write(text, name="program.bf"):
        path = tmp_path / name
        path.write_bytes(text if isinstance(text, bytes) else text.encode('utf-8'))
        return str(path)
    return _write
