"""Errors raised by block compression and decompression, and size-prefix parsing."""

from __future__ import annotations

__all__ = [
    "DecompressError",
    "OutputTooSmallError",
    "LiteralOutOfBoundsError",
    "ExpectedAnotherByteError",
    "OffsetOutOfBoundsError",
    "CompressError",
    "uncompressed_size",
]


class DecompressError(Exception):
    """Compressed data is invalid or cannot be decoded into the given output."""


class OutputTooSmallError(DecompressError):
    """The provided output is too small for the decompressed data."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "provided output is too small for the decompressed data, "
            f"actual {actual}, expected {expected}"
        )


class LiteralOutOfBoundsError(DecompressError):
    """A literal run reaches past the end of the input."""

    def __init__(self) -> None:
        super().__init__("literal is out of bounds of the input")


class ExpectedAnotherByteError(DecompressError):
    """The input ended where another byte was required."""

    def __init__(self) -> None:
        super().__init__("expected another byte, found none")


class OffsetOutOfBoundsError(DecompressError):
    """A match offset points before the start of the available data."""

    def __init__(self) -> None:
        super().__init__(
            "the offset to copy is not contained in the decompressed buffer"
        )


class CompressError(Exception):
    """The output buffer cannot hold the compressed data."""

    def __init__(self) -> None:
        super().__init__(
            "output is too small for the compressed data, use "
            "get_maximum_output_size to reserve enough space"
        )


def uncompressed_size(input: bytes) -> tuple[int, bytes]:
    """Split a little-endian u32 size prefix from the rest of ``input``."""
    data = bytes(input)
    if len(data) < 4:
        raise ExpectedAnotherByteError()
    return int.from_bytes(data[:4], "little"), data[4:]