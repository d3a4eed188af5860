"""
BF Runtime - Direct Interpreter for the Eight-Opcode Byte Tape Language

This package provides:

**Execution Engine:**
- Tape: unbounded byte cells with lazy growth in both directions
- Interpreter: left-to-right dispatch with lazy bracket matching

**Channels:**
- Byte sinks and sources over streams, buffers, and callables

**Support:**
- Errors: error codes, exceptions, terminal status
- Config: per-run settings (EOF policy, limits, bracket checking)

Version: 1.0.0
"""

__version__ = '1.0.0'

# Errors
from .errors import (
    E_UNMATCHED_BRACKET, E_ALLOCATION, E_IO, E_STEP_LIMIT, E_INVALID_INPUT,
    BFError, UnmatchedBracketError, AllocationError, InputError, OutputError, StepLimitError,
    Status,
)

# Configuration
from .config import EOFPolicy, RuntimeConfig

# Tape
from .tape import Tape

# Channels
from .channels import (
    ByteSink, StreamSink, BufferSink, CallableSink,
    ByteSource, StreamSource, BufferSource, CallableSource,
    coerce_sink, coerce_source,
)

# Interpreter
from .interpreter import (
    Interpreter, RunResult, Op, OPCODES,
    as_program, validate_brackets, run_bf, execute_bf,
)

__all__ = [
    '__version__',

    # Errors
    'E_UNMATCHED_BRACKET', 'E_ALLOCATION', 'E_IO', 'E_STEP_LIMIT', 'E_INVALID_INPUT',
    'BFError', 'UnmatchedBracketError', 'AllocationError', 'InputError', 'OutputError',
    'StepLimitError',
    'Status',

    # Configuration
    'EOFPolicy', 'RuntimeConfig',

    # Tape
    'Tape',

    # Channels
    'ByteSink', 'StreamSink', 'BufferSink', 'CallableSink',
    'ByteSource', 'StreamSource', 'BufferSource', 'CallableSource',
    'coerce_sink', 'coerce_source',

    # Interpreter
    'Interpreter', 'RunResult', 'Op', 'OPCODES',
    'as_program', 'validate_brackets', 'run_bf', 'execute_bf',
]
