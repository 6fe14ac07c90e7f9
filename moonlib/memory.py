"""Sizing rules for growable arrays and allocation-size checks."""

from __future__ import annotations

MIN_SIZE_ARRAY = 4
MAX_SIZET = (1 << 64) - 1


class LimitError(RuntimeError):
    """Raised when an array cannot grow past its limit."""

    def __init__(self, what: str, limit: int) -> None:
        super().__init__(f"too many {what} (limit is {limit})")
        self.what = what
        self.limit = limit


class BlockTooBigError(MemoryError):
    """Raised when a requested block size overflows the addressable size."""

    def __init__(self) -> None:
        super().__init__("memory allocation error: block too big")


def grow_size(size: int, limit: int, what: str) -> int:
    """Return the new capacity for an array of ``size`` elements that must grow.

    The size doubles (at least to a small minimum) but never past ``limit``;
    an array already at its limit raises :class:`LimitError`.
    """
    if size >= limit // 2:
        if size >= limit:
            raise LimitError(what, limit)
        return limit
    return max(size * 2, MIN_SIZE_ARRAY)


def check_block_size(count: int, elem_size: int, max_size: int = MAX_SIZET) -> int:
    """Return the byte size of ``count`` elements, raising if it would overflow."""
    if count + 1 > max_size // elem_size:
        raise BlockTooBigError()
    return count * elem_size