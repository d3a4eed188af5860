"""
BF Runtime - Tape

An unbounded sequence of unsigned 8-bit cells with a single cursor.

The tape is stored as two growable byte arrays indexed from the cell where
the cursor starts (offset 0):

    left:  offsets -1, -2, -3, ...   (left[k] holds offset -k - 1)
    right: offsets  0,  1,  2, ...   (right[k] holds offset k)

A cell is materialized the first time the cursor steps onto it. Unvisited
cells are implicitly 0, and the cursor never points outside materialized
storage.
"""

import logging
from typing import List, Optional

from .errors import AllocationError, BFError, E_INVALID_INPUT

logger = logging.getLogger(__name__)

# Report growth once the tape passes each power of two from here on
GROWTH_LOG_THRESHOLD = 1024


class Tape:
    """Byte tape with lazy growth in both directions"""

    def __init__(self, max_cells: Optional[int] = None):
        """
        Initialize a tape holding one zero cell under the cursor

        Args:
            max_cells: Upper bound on materialized cells (None for unbounded)
        """
        self.max_cells = max_cells
        self._left = bytearray()
        self._right = bytearray(1)
        self._pos = 0

    @property
    def position(self) -> int:
        """Cursor offset from the starting cell"""
        return self._pos

    def __len__(self) -> int:
        return len(self._left) + len(self._right)

    def current(self) -> int:
        if self._pos >= 0:
            return self._right[self._pos]
        return self._left[-self._pos - 1]

    def set(self, value: int):
        """Store one byte at the cursor"""
        if not isinstance(value, int) or not 0 <= value <= 255:
            raise BFError(E_INVALID_INPUT, f"Cell value must be a byte, got {value!r}")
        if self._pos >= 0:
            self._right[self._pos] = value
        else:
            self._left[-self._pos - 1] = value

    def increment(self):
        self.set((self.current() + 1) % 256)

    def decrement(self):
        self.set((self.current() - 1) % 256)

    def shift_left(self):
        """Move the cursor one cell left, materializing it if needed"""
        if self._pos <= 0 and -self._pos == len(self._left):
            self._grow(self._left)
        self._pos -= 1

    def shift_right(self):
        """Move the cursor one cell right, materializing it if needed"""
        if self._pos >= 0 and self._pos + 1 == len(self._right):
            self._grow(self._right)
        self._pos += 1

    def _grow(self, side: bytearray):
        size = len(self)
        if self.max_cells is not None and size >= self.max_cells:
            raise AllocationError(f"Tape limit of {self.max_cells} cells reached")
        try:
            side.append(0)
        except MemoryError as e:
            raise AllocationError(f"Could not grow tape past {size} cells") from e

        size += 1
        if size >= GROWTH_LOG_THRESHOLD and size & (size - 1) == 0:
            logger.debug("Tape grew to %d cells (cursor at %d)", size, self._pos)

    def snapshot(self) -> bytes:
        """Materialized cells, leftmost first"""
        return bytes(reversed(self._left)) + bytes(self._right)

    def window(self, radius: int = 5) -> List[int]:
        """
        Cell values around the cursor, without materializing anything

        Args:
            radius: Number of cells to include on each side of the cursor

        Returns:
            List of 2 * radius + 1 values; the cursor cell is in the middle
        """
        values = []
        for offset in range(self._pos - radius, self._pos + radius + 1):
            if 0 <= offset < len(self._right):
                values.append(self._right[offset])
            elif 0 <= -offset - 1 < len(self._left):
                values.append(self._left[-offset - 1])
            else:
                values.append(0)
        return values

    def __repr__(self):
        return f"Tape(position={self._pos}, cells={len(self)}, current={self.current()})"
