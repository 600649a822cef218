"""
Data Memory
===========

A fixed-size array of integer cells, zero on creation and on clear.

Every access is bounds-checked. An address outside ``[0, size)`` raises
AddressOutOfRangeError instead of wrapping (Python would otherwise accept
negative indices) or failing with a bare IndexError.
"""

from typing import Iterable, List, Tuple

from accsim.errors import AddressOutOfRangeError


DEFAULT_MEMORY_SIZE = 16


class Memory:
    """
    Integer data memory.

    Cells hold unbounded Python ints; there is no word size.

    Example:
        >>> mem = Memory(4)
        >>> mem.write(2, 7)
        >>> mem.read(2)
        7
        >>> mem.dump()
        (0, 0, 7, 0)
    """

    def __init__(self, size: int = DEFAULT_MEMORY_SIZE):
        """
        Initialize memory.

        Args:
            size: Number of addressable cells (>= 0)
        """
        if size < 0:
            raise ValueError(f"Memory size must be >= 0, got {size}")
        self._cells: List[int] = [0] * size

    @property
    def size(self) -> int:
        """Number of addressable cells."""
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def __setitem__(self, address: int, value: int) -> None:
        self.write(address, value)

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._cells):
            raise AddressOutOfRangeError(address, len(self._cells))

    def read(self, address: int) -> int:
        """
        Read a cell.

        Raises:
            AddressOutOfRangeError: If address is outside the array
        """
        self._check(address)
        return self._cells[address]

    def write(self, address: int, value: int) -> None:
        """
        Write a cell.

        Raises:
            AddressOutOfRangeError: If address is outside the array
        """
        self._check(address)
        self._cells[address] = value

    def load(self, values: Iterable[int], start: int = 0) -> None:
        """
        Copy values into consecutive cells starting at ``start``.

        Nothing is written unless every target cell is in range.

        Raises:
            AddressOutOfRangeError: If any target cell is outside the array
        """
        values = list(values)
        if not values:
            return
        self._check(start)
        self._check(start + len(values) - 1)
        self._cells[start:start + len(values)] = values

    def clear(self) -> None:
        """Set every cell to zero."""
        for i in range(len(self._cells)):
            self._cells[i] = 0

    def dump(self) -> Tuple[int, ...]:
        """Snapshot of every cell in address order."""
        return tuple(self._cells)

    def __repr__(self) -> str:
        return f"Memory(size={self.size})"
