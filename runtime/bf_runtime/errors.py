"""
BF Runtime - Error Definitions

Error codes, the exception hierarchy, and the terminal status of a run.

Every exception carries a code and a message and renders as "[CODE] message",
so callers can match on either the class or the code string.

Status values keep the numeric codes of the classic C interpreter:
    0  success
    1  invalid program (unmatched brackets)
    2  bad memory allocation
    3  input/output error
"""

from enum import IntEnum
from typing import Optional


# ============================================================================
# Error Codes
# ============================================================================

E_UNMATCHED_BRACKET = "E_UNMATCHED_BRACKET"
E_ALLOCATION = "E_ALLOCATION"
E_IO = "E_IO"
E_STEP_LIMIT = "E_STEP_LIMIT"
E_INVALID_INPUT = "E_INVALID_INPUT"


# ============================================================================
# Exceptions
# ============================================================================

class BFError(Exception):
    """Base exception for BF runtime errors"""
    def __init__(self, code: str, message: str, position: Optional[int] = None):
        self.code = code
        self.message = message
        self.position = position
        super().__init__(f"[{code}] {message}")


class UnmatchedBracketError(BFError):
    """A '[' or ']' with no reachable partner in the program buffer"""
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(E_UNMATCHED_BRACKET, message, position)


class AllocationError(BFError):
    """The tape could not grow"""
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(E_ALLOCATION, message, position)


class OutputError(BFError):
    """The output sink rejected a byte"""
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(E_IO, message, position)


class InputError(BFError):
    """The input source failed while reading a byte"""
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(E_IO, message, position)


class StepLimitError(BFError):
    """The configured instruction budget ran out"""
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(E_STEP_LIMIT, message, position)


# ============================================================================
# Terminal Status
# ============================================================================

class Status(IntEnum):
    """Terminal status of a run"""
    SUCCESS = 0
    UNMATCHED_BRACKET = 1
    ALLOCATION_ERROR = 2
    IO_ERROR = 3
    STEP_LIMIT = 4

    @classmethod
    def from_error(cls, error: BFError) -> "Status":
        """Map a runtime exception to its terminal status"""
        try:
            return _STATUS_BY_CODE[error.code]
        except KeyError:
            raise ValueError(f"No terminal status for error code {error.code}") from error

    @property
    def description(self) -> str:
        """Human-readable message used by the command line"""
        return _DESCRIPTIONS[self]


_STATUS_BY_CODE = {
    E_UNMATCHED_BRACKET: Status.UNMATCHED_BRACKET,
    E_ALLOCATION: Status.ALLOCATION_ERROR,
    E_IO: Status.IO_ERROR,
    E_STEP_LIMIT: Status.STEP_LIMIT,
}

_DESCRIPTIONS = {
    Status.SUCCESS: "success",
    Status.UNMATCHED_BRACKET: "unmatched brackets",
    Status.ALLOCATION_ERROR: "bad memory allocation",
    Status.IO_ERROR: "input/output error",
    Status.STEP_LIMIT: "step limit exceeded",
}
