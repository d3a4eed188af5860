"""
BF Runtime - Interpreter

Direct interpretation of the eight-opcode byte-tape language.

Architecture:
- Program: immutable bytes; anything that is not an opcode is a no-op
- Tape: unbounded byte cells under one cursor (see tape.py)
- Dispatch loop: walks the program left to right, one byte per step
- Bracket scans: loops jump by rescanning the program buffer

Opcodes:
    +  increment the current cell (mod 256)
    -  decrement the current cell (mod 256)
    <  move the cursor left
    >  move the cursor right
    .  write the current cell to the output sink
    ,  read one byte from the input source into the current cell
    [  if the current cell is 0, jump past the matching ]
    ]  if the current cell is not 0, jump back to the matching [

Brackets are matched lazily: every bracket the dispatch loop evaluates is
scanned for its partner, whether or not it then jumps. A bracket that is
never reached is never checked. Set RuntimeConfig.check_brackets to validate
the whole program first.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .channels import BufferSink, coerce_sink, coerce_source
from .config import RuntimeConfig
from .errors import (
    BFError, UnmatchedBracketError, AllocationError, InputError, OutputError, StepLimitError,
    Status, E_INVALID_INPUT,
)
from .tape import Tape

logger = logging.getLogger(__name__)


# ============================================================================
# Opcodes
# ============================================================================

class Op:
    """Opcode byte values"""
    INC = ord('+')
    DEC = ord('-')
    LEFT = ord('<')
    RIGHT = ord('>')
    OUTPUT = ord('.')
    INPUT = ord(',')
    LOOP_START = ord('[')
    LOOP_END = ord(']')


OPCODES = frozenset(b'+-<>.,[]')

# Errors that end a run with a terminal status instead of propagating
RUN_ERRORS = (UnmatchedBracketError, AllocationError, InputError, OutputError, StepLimitError)


def as_program(source: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """Normalize program text to an immutable byte buffer"""
    if isinstance(source, bytes):
        return source
    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, str):
        return source.encode('utf-8')
    raise BFError(E_INVALID_INPUT, f"Program must be bytes or str, got {type(source).__name__}")


def validate_brackets(program: Union[bytes, str]):
    """
    Check that every bracket in the program has a partner

    Raises:
        UnmatchedBracketError: On the first stray ']', or the innermost
            '[' left open at the end of the program
    """
    program = as_program(program)
    open_positions = []
    for i, op in enumerate(program):
        if op == Op.LOOP_START:
            open_positions.append(i)
        elif op == Op.LOOP_END:
            if not open_positions:
                raise UnmatchedBracketError(f"Unmatched ']' at position {i}", i)
            open_positions.pop()

    if open_positions:
        pos = open_positions[-1]
        raise UnmatchedBracketError(f"Unmatched '[' at position {pos}", pos)


# ============================================================================
# Run Result
# ============================================================================

@dataclass
class RunResult:
    """Outcome of one interpreter run"""
    status: Status
    steps: int = 0
    bytes_written: int = 0
    bytes_read: int = 0
    error: Optional[BFError] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.SUCCESS


# ============================================================================
# Interpreter
# ============================================================================

class Interpreter:
    """Execute a program against a byte sink and a byte source"""

    def __init__(self, program: Union[bytes, str], sink: Any = None, source: Any = None,
                 config: Optional[RuntimeConfig] = None):
        """
        Initialize interpreter

        Args:
            program: Program text; str is encoded as UTF-8
            sink: Output destination (ByteSink, binary stream, callable, or None to buffer)
            source: Input origin (ByteSource, bytes, binary stream, callable, or None for no input)
            config: Runtime settings (defaults to RuntimeConfig())
        """
        self.program = as_program(program)
        self.config = config or RuntimeConfig()
        self.sink = coerce_sink(sink, flush=self.config.flush_output)
        self.source = coerce_source(source)

        self.tape = Tape(self.config.max_cells)
        self.pc = 0
        self.steps = 0
        self.bytes_written = 0
        self.bytes_read = 0

    def run(self) -> RunResult:
        """
        Run the program to completion

        Each run starts on a fresh tape. The finished run's tape stays readable
        as self.tape until the next run replaces it.

        Returns:
            RunResult; fatal errors are reported through status and error,
            and output written before the error stays written
        """
        self.tape = Tape(self.config.max_cells)
        self.pc = 0
        self.steps = 0
        self.bytes_written = 0
        self.bytes_read = 0

        error = None
        try:
            if self.config.check_brackets:
                validate_brackets(self.program)
            self._dispatch()
        except RUN_ERRORS as e:
            if e.position is None:
                e.position = self.pc
            error = e

        status = Status.from_error(error) if error else Status.SUCCESS
        logger.debug("Run finished: status=%s steps=%d written=%d read=%d",
                     status.name, self.steps, self.bytes_written, self.bytes_read)
        return RunResult(
            status=status,
            steps=self.steps,
            bytes_written=self.bytes_written,
            bytes_read=self.bytes_read,
            error=error,
        )

    def execute(self) -> RunResult:
        """Run the program, raising the error of a failed run"""
        result = self.run()
        if result.error is not None:
            raise result.error
        return result

    def _dispatch(self):
        program = self.program
        n = len(program)
        tape = self.tape
        max_steps = self.config.max_steps

        i = 0
        while i < n:
            op = program[i]
            if op not in OPCODES:
                i += 1
                continue

            self.pc = i
            self.steps += 1
            if max_steps is not None and self.steps > max_steps:
                raise StepLimitError(f"Exceeded {max_steps} steps", i)

            if op == Op.INC:
                tape.increment()
            elif op == Op.DEC:
                tape.decrement()
            elif op == Op.LEFT:
                tape.shift_left()
            elif op == Op.RIGHT:
                tape.shift_right()
            elif op == Op.OUTPUT:
                self.sink.write_byte(tape.current())
                self.bytes_written += 1
            elif op == Op.INPUT:
                self._read_input()
            elif op == Op.LOOP_START:
                match = self._scan_forward(i)
                if tape.current() == 0:
                    i = match
            elif op == Op.LOOP_END:
                match = self._scan_backward(i)
                if tape.current() != 0:
                    i = match

            i += 1

    def _read_input(self):
        value = self.source.read_byte()
        if value is None:
            value = self.config.eof_policy.apply(self.tape.current())
        else:
            self.bytes_read += 1
        self.tape.set(value)

    def _scan_forward(self, start: int) -> int:
        """Return the index of the ']' matching the '[' at start"""
        program = self.program
        last = len(program) - 1
        balance = 1
        i = start
        while balance:
            if i >= last:
                logger.debug("Forward scan from %d ran off the end of the program", start)
                raise UnmatchedBracketError(f"No matching ']' for '[' at position {start}", start)
            i += 1
            if program[i] == Op.LOOP_START:
                balance += 1
            elif program[i] == Op.LOOP_END:
                balance -= 1
        return i

    def _scan_backward(self, start: int) -> int:
        """Return the index of the '[' matching the ']' at start"""
        program = self.program
        balance = 1
        i = start
        while balance:
            i -= 1
            # Check before reading; index -1 would wrap to the end of the buffer
            if i < 0:
                logger.debug("Backward scan from %d ran off the start of the program", start)
                raise UnmatchedBracketError(f"No matching '[' for ']' at position {start}", start)
            if program[i] == Op.LOOP_END:
                balance += 1
            elif program[i] == Op.LOOP_START:
                balance -= 1
        return i


# ============================================================================
# Convenience Functions
# ============================================================================

def run_bf(program: Union[bytes, str], input: Union[bytes, str] = b"",
           config: Optional[RuntimeConfig] = None) -> Tuple[RunResult, bytes]:
    """
    Run a program against in-memory channels

    Returns:
        (RunResult, output bytes); output includes anything written before an error

    Example:
        >>> result, output = run_bf(',.', b'A')
        >>> result.status, output
        (<Status.SUCCESS: 0>, b'A')
    """
    sink = BufferSink()
    interpreter = Interpreter(program, sink=sink, source=input, config=config)
    result = interpreter.run()
    return result, sink.getvalue()


def execute_bf(program: Union[bytes, str], input: Union[bytes, str] = b"",
               config: Optional[RuntimeConfig] = None) -> bytes:
    """
    Run a program and return its output

    Raises:
        BFError: If the run fails

    Example:
        >>> execute_bf('++++++++[>++++++++<-]>+.')
        b'A'
    """
    sink = BufferSink()
    Interpreter(program, sink=sink, source=input, config=config).execute()
    return sink.getvalue()
