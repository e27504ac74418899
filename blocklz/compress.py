"""Encoding of LZ4 blocks, with or without an external dictionary."""

from __future__ import annotations

from .errors import CompressError
from .hashtable import HashTable4K, HashTable4KU16
from .sequences import (
    backtrack_match,
    count_same_bytes,
    get_maximum_output_size,
    token_from_literal,
    token_from_literal_and_match_length,
    write_integer,
)

__all__ = [
    "compress_internal",
    "compress_into",
    "compress_into_with_dict",
    "compress",
    "compress_prepend_size",
    "compress_with_dict",
    "compress_prepend_size_with_dict",
]

WINDOW_SIZE = 64 * 1024
# The last match must start at least this many bytes before the end of the block.
_MFLIMIT = 12
# Blocks shorter than this are stored as literals only.
_LZ4_MIN_LENGTH = _MFLIMIT + 1
_MAX_DISTANCE = (1 << 16) - 1
_MINMATCH = 4
# The search step grows after 1 << _INCREASE_STEPSIZE_BITSHIFT misses.
_INCREASE_STEPSIZE_BITSHIFT = 5
_U16_TABLE_LIMIT = 0xFFFF


def _handle_last_literals(output: bytearray, input: bytes, start: int) -> None:
    lit_len = len(input) - start
    output.append(token_from_literal(lit_len))
    if lit_len >= 0xF:
        write_integer(output, lit_len - 0xF)
    output.extend(input[start:])


def compress_internal(
    input: bytes,
    input_pos: int,
    output: bytearray,
    table,
    ext_dict: bytes,
    input_stream_offset: int,
    use_dict: bool,
) -> int:
    """Append the compressed form of ``input[input_pos:]`` to ``output``.

    Bytes of ``input`` before ``input_pos`` act as a prefix that matches may
    refer to, and ``ext_dict`` holds data logically preceding ``input``.
    ``input_stream_offset`` is the logical position of ``input[0]`` as stored
    in ``table``. Returns the number of bytes appended.
    """
    input = bytes(input)
    ext_dict = bytes(ext_dict)
    if not 0 <= input_pos <= len(input):
        raise ValueError(f"input position {input_pos} is outside the input")
    if use_dict:
        if len(ext_dict) > WINDOW_SIZE:
            raise ValueError("external dictionary is larger than the window size")
        if len(ext_dict) > input_stream_offset:
            raise ValueError("external dictionary is longer than the stream offset")
    elif ext_dict:
        raise ValueError("an external dictionary was given without dictionary mode")

    output_start = len(output)
    if len(input) - input_pos < _LZ4_MIN_LENGTH:
        _handle_last_literals(output, input, input_pos)
        return len(output) - output_start

    ext_dict_stream_offset = input_stream_offset - len(ext_dict)
    end_pos_check = len(input) - _MFLIMIT
    literal_start = input_pos
    cur = input_pos

    if cur == 0 and input_stream_offset == 0:
        # A block cannot start with a match unless it refers to earlier data.
        table.put_at(table.hash_at(input, 0), 0)
        cur = 1

    while True:
        non_match_count = 1 << _INCREASE_STEPSIZE_BITSHIFT
        next_cur = cur
        while True:
            step_size = non_match_count >> _INCREASE_STEPSIZE_BITSHIFT
            non_match_count += 1
            cur = next_cur
            next_cur += step_size

            if cur > end_pos_check:
                _handle_last_literals(output, input, literal_start)
                return len(output) - output_start

            hash_value = table.hash_at(input, cur)
            candidate = table.get_at(hash_value)
            table.put_at(hash_value, cur + input_stream_offset)

            offset = input_stream_offset + cur - candidate
            if offset > _MAX_DISTANCE or offset <= 0:
                continue

            if candidate >= input_stream_offset:
                candidate -= input_stream_offset
                source = input
            elif use_dict:
                candidate -= ext_dict_stream_offset
                if candidate < 0:
                    continue
                source = ext_dict
            else:
                continue

            if source[candidate : candidate + 4] == input[cur : cur + 4]:
                break

        cur, candidate = backtrack_match(input, cur, literal_start, source, candidate)
        lit_len = cur - literal_start

        cur += _MINMATCH
        candidate += _MINMATCH
        duplicate_length = count_same_bytes(input, cur, source, candidate)
        cur += duplicate_length

        hash_value = table.hash_at(input, cur - 2)
        table.put_at(hash_value, cur - 2 + input_stream_offset)

        output.append(token_from_literal_and_match_length(lit_len, duplicate_length))
        if lit_len >= 0xF:
            write_integer(output, lit_len - 0xF)
        output.extend(input[literal_start : literal_start + lit_len])
        output.extend(offset.to_bytes(2, "little"))
        if duplicate_length >= 0xF:
            write_integer(output, duplicate_length - 0xF)
        literal_start = cur


def _init_dict(table, dict_data: bytes) -> bytes:
    if len(dict_data) > WINDOW_SIZE:
        dict_data = dict_data[len(dict_data) - WINDOW_SIZE :]
    for i in range(0, len(dict_data) - 8 + 1, 3):
        table.put_at(table.hash_at(dict_data, i), i)
    return dict_data


def _compress_with_table(input: bytes, output: bytearray, dict_data: bytes, use_dict: bool) -> int:
    if len(dict_data) + len(input) < _U16_TABLE_LIMIT:
        table = HashTable4KU16()
    else:
        table = HashTable4K()
    dict_data = _init_dict(table, dict_data)
    return compress_internal(input, 0, output, table, dict_data, len(dict_data), use_dict)


def _compress_into_buffer(input: bytes, output, dict_data: bytes, use_dict: bool) -> int:
    input = bytes(input)
    if len(output) < get_maximum_output_size(len(input)):
        raise CompressError()
    compressed = bytearray()
    length = _compress_with_table(input, compressed, bytes(dict_data), use_dict)
    output[:length] = compressed
    return length


def compress_into(input: bytes, output) -> int:
    """Compress ``input`` into the writable buffer ``output``; return the compressed length.

    ``output`` must hold at least ``get_maximum_output_size(len(input))`` bytes.
    """
    return _compress_into_buffer(input, output, b"", False)


def compress_into_with_dict(input: bytes, output, dict_data: bytes) -> int:
    """Compress ``input`` into ``output`` using ``dict_data``; return the compressed length."""
    return _compress_into_buffer(input, output, dict_data, True)


def _compress_to_bytes(input: bytes, prepend_size: bool, dict_data: bytes, use_dict: bool) -> bytes:
    input = bytes(input)
    dict_data = bytes(dict_data)
    if len(dict_data) <= 3:
        dict_data = b""
    output = bytearray()
    if prepend_size:
        output.extend((len(input) & 0xFFFFFFFF).to_bytes(4, "little"))
    _compress_with_table(input, output, dict_data, use_dict)
    return bytes(output)


def compress(input: bytes) -> bytes:
    """Compress ``input`` into a block."""
    return _compress_to_bytes(input, False, b"", False)


def compress_prepend_size(input: bytes) -> bytes:
    """Compress ``input`` and prefix the block with its uncompressed size as a little-endian u32."""
    return _compress_to_bytes(input, True, b"", False)


def compress_with_dict(input: bytes, ext_dict: bytes) -> bytes:
    """Compress ``input`` using ``ext_dict`` as preceding data."""
    return _compress_to_bytes(input, False, ext_dict, True)


def compress_prepend_size_with_dict(input: bytes, ext_dict: bytes) -> bytes:
    """Compress ``input`` with ``ext_dict`` and prefix the uncompressed size."""
    return _compress_to_bytes(input, True, ext_dict, True)