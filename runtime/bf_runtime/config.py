"""
BF Runtime - Configuration

Per-run settings. All defaults reproduce the classic interpreter: unbounded
tape, no step cap, lazy bracket matching, unbuffered output, and 0 stored
when ',' hits end of input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import BFError, E_INVALID_INPUT


class EOFPolicy(Enum):
    """What ',' stores in the current cell once input is exhausted"""
    ZERO = "zero"
    UNCHANGED = "unchanged"
    MINUS_ONE = "minus-one"

    def apply(self, cell: int) -> int:
        """Return the value the cell should hold after an exhausted read"""
        if self is EOFPolicy.ZERO:
            return 0
        if self is EOFPolicy.MINUS_ONE:
            return -1 % 256
        return cell


@dataclass
class RuntimeConfig:
    """Settings for a single interpreter run"""
    eof_policy: EOFPolicy = EOFPolicy.ZERO
    max_cells: Optional[int] = None
    max_steps: Optional[int] = None
    check_brackets: bool = False
    flush_output: bool = True

    def __post_init__(self):
        if isinstance(self.eof_policy, str):
            try:
                self.eof_policy = EOFPolicy(self.eof_policy)
            except ValueError:
                raise BFError(E_INVALID_INPUT, f"Unknown EOF policy: {self.eof_policy!r}")

        for name in ('max_cells', 'max_steps'):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
                raise BFError(E_INVALID_INPUT, f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_args(cls, args: Any) -> "RuntimeConfig":
        """Build a config from parsed command-line arguments"""
        return cls(
            eof_policy=args.eof,
            max_cells=args.max_cells,
            max_steps=args.max_steps,
            check_brackets=args.check_brackets,
            flush_output=not args.no_flush,
        )
