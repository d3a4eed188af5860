"""
BF Runtime - Byte Channels

Adapters between the interpreter and the outside world. The interpreter only
ever writes or reads one byte at a time:

    sink.write_byte(value)   -> None, raises OutputError if rejected
    source.read_byte()       -> int 0..255, or None at end of input

Adapters:
- StreamSink / StreamSource: binary file objects (sys.stdout.buffer, open(..., 'rb'))
- BufferSink / BufferSource: in-memory bytes
- CallableSink / CallableSource: plain functions
"""

from typing import Any, Callable, Optional, Union

from .errors import BFError, InputError, OutputError, E_INVALID_INPUT


# ============================================================================
# Sinks
# ============================================================================

class ByteSink:
    """Destination for output bytes"""

    def write_byte(self, value: int):
        raise NotImplementedError


class StreamSink(ByteSink):
    """Write bytes to a binary stream, optionally flushing after each one"""

    def __init__(self, stream: Any, flush: bool = True):
        self.stream = stream
        self.flush = flush

    def write_byte(self, value: int):
        try:
            written = self.stream.write(bytes((value,)))
            if self.flush:
                self.stream.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"Output stream rejected byte {value}: {e}") from e
        # Raw streams report a short write instead of raising
        if written == 0:
            raise OutputError(f"Output stream rejected byte {value}")


class BufferSink(ByteSink):
    """Collect output bytes in memory"""

    def __init__(self, limit: Optional[int] = None):
        """
        Args:
            limit: Reject bytes once this many have been collected (None for no limit)
        """
        self.buffer = bytearray()
        self.limit = limit

    def write_byte(self, value: int):
        if self.limit is not None and len(self.buffer) >= self.limit:
            raise OutputError(f"Output buffer full after {self.limit} bytes")
        self.buffer.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)


class CallableSink(ByteSink):
    """Pass each byte to a function; a False return rejects it"""

    def __init__(self, func: Callable[[int], Any]):
        self.func = func

    def write_byte(self, value: int):
        try:
            accepted = self.func(value)
        except OSError as e:
            raise OutputError(f"Output callback failed on byte {value}: {e}") from e
        if accepted is False:
            raise OutputError(f"Output callback rejected byte {value}")


# ============================================================================
# Sources
# ============================================================================

class ByteSource:
    """Origin of input bytes"""

    def read_byte(self) -> Optional[int]:
        raise NotImplementedError


class StreamSource(ByteSource):
    """Read bytes from a binary stream"""

    def __init__(self, stream: Any):
        self.stream = stream

    def read_byte(self) -> Optional[int]:
        try:
            data = self.stream.read(1)
        except (OSError, ValueError) as e:
            raise InputError(f"Input stream failed: {e}") from e
        if not data:
            return None
        return data[0]


class BufferSource(ByteSource):
    """Read bytes from an in-memory buffer"""

    def __init__(self, data: Union[bytes, bytearray, str] = b""):
        if isinstance(data, str):
            data = data.encode('utf-8')
        self.data = bytes(data)
        self.pos = 0

    def read_byte(self) -> Optional[int]:
        if self.pos >= len(self.data):
            return None
        value = self.data[self.pos]
        self.pos += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos


class CallableSource(ByteSource):
    """Pull bytes from a function returning an int, a one-byte bytes, or None at EOF"""

    def __init__(self, func: Callable[[], Any]):
        self.func = func

    def read_byte(self) -> Optional[int]:
        value = self.func()
        if value is None or value == b"" or value == -1:
            return None
        if isinstance(value, (bytes, bytearray)) and len(value) == 1:
            return value[0]
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255:
            return value
        raise BFError(E_INVALID_INPUT, f"Input callback returned {value!r}, expected a byte")


# ============================================================================
# Coercion
# ============================================================================

def coerce_sink(target: Any, flush: bool = True) -> ByteSink:
    """Build a sink from a ByteSink, a binary stream, a callable, or None"""
    if target is None:
        return BufferSink()
    if isinstance(target, ByteSink):
        return target
    if hasattr(target, 'write'):
        return StreamSink(target, flush=flush)
    if callable(target):
        return CallableSink(target)
    raise BFError(E_INVALID_INPUT, f"Cannot use {type(target).__name__} as an output sink")


def coerce_source(origin: Any) -> ByteSource:
    """Build a source from a ByteSource, bytes, str, a binary stream, a callable, or None"""
    if origin is None:
        return BufferSource(b"")
    if isinstance(origin, ByteSource):
        return origin
    if isinstance(origin, (bytes, bytearray, str)):
        return BufferSource(origin)
    if hasattr(origin, 'read'):
        return StreamSource(origin)
    if callable(origin):
        return CallableSource(origin)
    raise BFError(E_INVALID_INPUT, f"Cannot use {type(origin).__name__} as an input source")
