"""Hash tables mapping hashed input bytes to the positions where they were seen."""

from __future__ import annotations

from array import array

__all__ = [
    "get_batch",
    "get_batch_arch",
    "hash4",
    "hash5",
    "HashTable4KU16",
    "HashTable4K",
    "HashTable8K",
]

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_PRIME32 = 2654435761
_PRIME_BYTES = 889523592379
_WORD_SIZE = 8

_SIZE_4K = 4 * 1024
_SHIFT_4K = 4
_SIZE_8K = 8 * 1024
_SHIFT_8K = 3


def _read(input: bytes, n: int, width: int) -> int:
    chunk = input[n : n + width]
    if n < 0 or len(chunk) != width:
        raise IndexError(f"cannot read {width} bytes at position {n}")
    return int.from_bytes(chunk, "little")


def _zeroed(typecode: str, size: int) -> array:
    return array(typecode, [0]) * size


def get_batch(input: bytes, n: int) -> int:
    """Read a 4-byte little-endian integer at position ``n``."""
    return _read(input, n, 4)


def get_batch_arch(input: bytes, n: int) -> int:
    """Read a machine-word (8-byte) little-endian integer at position ``n``."""
    return _read(input, n, _WORD_SIZE)


def hash4(sequence: int) -> int:
    """Hash a 4-byte sequence to a 16-bit value."""
    return ((sequence * _PRIME32) & _MASK32) >> 16


def hash5(sequence: int) -> int:
    """Hash the low five bytes of a word-sized sequence to a 16-bit value."""
    return ((((sequence << 24) & _MASK64) * _PRIME_BYTES) & _MASK64) >> 48


class HashTable4KU16:
    """4096 slots of 16-bit positions, for inputs shorter than 64 KiB."""

    def __init__(self) -> None:
        self._slots = _zeroed("H", _SIZE_4K)

    def get_at(self, hash_value: int) -> int:
        """Return the position stored for ``hash_value``."""
        return self._slots[hash_value >> _SHIFT_4K]

    def put_at(self, hash_value: int, val: int) -> None:
        """Store position ``val`` for ``hash_value``, truncated to 16 bits."""
        self._slots[hash_value >> _SHIFT_4K] = val & _MASK16

    def clear(self) -> None:
        """Reset every slot to zero."""
        self._slots = _zeroed("H", _SIZE_4K)

    def hash_at(self, input: bytes, pos: int) -> int:
        """Hash the four bytes of ``input`` starting at ``pos``."""
        return hash4(get_batch(input, pos))

    def __len__(self) -> int:
        return _SIZE_4K


class HashTable4K:
    """4096 slots of 32-bit positions."""

    def __init__(self) -> None:
        self._slots = _zeroed("L", _SIZE_4K)

    def get_at(self, hash_value: int) -> int:
        """Return the position stored for ``hash_value``."""
        return self._slots[hash_value >> _SHIFT_4K]

    def put_at(self, hash_value: int, val: int) -> None:
        """Store position ``val`` for ``hash_value``, truncated to 32 bits."""
        self._slots[hash_value >> _SHIFT_4K] = val & _MASK32

    def clear(self) -> None:
        """Reset every slot to zero."""
        self._slots = _zeroed("L", _SIZE_4K)

    def hash_at(self, input: bytes, pos: int) -> int:
        """Hash the low five bytes of the word of ``input`` at ``pos``."""
        return hash5(get_batch_arch(input, pos))

    def reposition(self, offset: int) -> None:
        """Subtract ``offset`` from every stored position, saturating at zero."""
        self._slots = array("L", (max(value - offset, 0) for value in self._slots))

    def __len__(self) -> int:
        return _SIZE_4K


class HashTable8K:
    """8192 slots of 32-bit positions."""

    def __init__(self) -> None:
        self._slots = _zeroed("L", _SIZE_8K)

    def get_at(self, hash_value: int) -> int:
        """Return the position stored for ``hash_value``."""
        return self._slots[hash_value >> _SHIFT_8K]

    def put_at(self, hash_value: int, val: int) -> None:
        """Store position ``val`` for ``hash_value``, truncated to 32 bits."""
        self._slots[hash_value >> _SHIFT_8K] = val & _MASK32

    def clear(self) -> None:
        """Reset every slot to zero."""
        self._slots = _zeroed("L", _SIZE_8K)

    def hash_at(self, input: bytes, pos: int) -> int:
        """Hash the low five bytes of the word of ``input`` at ``pos``."""
        return hash5(get_batch_arch(input, pos))

    def __len__(self) -> int:
        return _SIZE_8K