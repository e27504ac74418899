"""Building blocks for encoding LZ4 sequences: tokens, length extensions and match scanning."""

from __future__ import annotations

__all__ = [
    "token_from_literal",
    "token_from_literal_and_match_length",
    "count_same_bytes",
    "write_integer",
    "backtrack_match",
    "get_maximum_output_size",
]

# The last bytes of a block are always literals; matches must end this far before the end.
_LAST_LITERALS = 5
END_OFFSET = _LAST_LITERALS + 1

_CHUNK = 8


def token_from_literal(lit_len: int) -> int:
    """Token for a literal-only sequence; the length saturates at 15 in the high nibble."""
    return (lit_len << 4) if lit_len < 0xF else 0xF0


def token_from_literal_and_match_length(lit_len: int, duplicate_length: int) -> int:
    """Token holding the literal length (high nibble) and match length (low nibble), each saturated at 15."""
    token = token_from_literal(lit_len)
    token |= duplicate_length if duplicate_length < 0xF else 0xF
    return token


def count_same_bytes(input: bytes, cur: int, source: bytes, candidate: int) -> int:
    """Count equal leading bytes of ``input[cur:]`` and ``source[candidate:]``.

    The last ``END_OFFSET`` bytes of ``input`` are never matched, as they must
    be emitted as literals. The caller advances its cursor by the result.
    """
    limit = min(len(input) - END_OFFSET - cur, len(source) - candidate)
    if limit <= 0:
        return 0
    count = 0
    while count + _CHUNK <= limit:
        a = input[cur + count : cur + count + _CHUNK]
        b = source[candidate + count : candidate + count + _CHUNK]
        if a != b:
            break
        count += _CHUNK
    while count < limit and input[cur + count] == source[candidate + count]:
        count += 1
    return count


def write_integer(output: bytearray, n: int) -> None:
    """Append ``n`` as a length extension: a run of 0xFF bytes and a final byte below 255."""
    if n < 0:
        raise ValueError(f"cannot encode negative length {n}")
    full, rest = divmod(n, 0xFF)
    output.extend(b"\xff" * full)
    output.append(rest)


def backtrack_match(
    input: bytes, cur: int, literal_start: int, source: bytes, candidate: int
) -> tuple[int, int]:
    """Extend a match backwards while the preceding bytes agree.

    Never moves ``cur`` before ``literal_start`` or ``candidate`` below zero.
    Returns the new ``(cur, candidate)`` pair.
    """
    while candidate > 0 and cur > literal_start and input[cur - 1] == source[candidate - 1]:
        cur -= 1
        candidate -= 1
    return cur, candidate


def get_maximum_output_size(input_len: int) -> int:
    """Upper bound on the compressed size of ``input_len`` bytes."""
    return 16 + 4 + (input_len * 110 // 100)