"""Decoding of LZ4 blocks, with or without an external dictionary."""

from __future__ import annotations

from .errors import (
    ExpectedAnotherByteError,
    LiteralOutOfBoundsError,
    OffsetOutOfBoundsError,
    OutputTooSmallError,
    uncompressed_size,
)

__all__ = [
    "read_integer",
    "read_u16",
    "does_token_fit",
    "decompress_internal",
    "decompress_into",
    "decompress_into_with_dict",
    "decompress",
    "decompress_with_dict",
    "decompress_size_prepended",
    "decompress_size_prepended_with_dict",
]

_MINMATCH = 4
_FIT_TOKEN_MASK_LITERAL = 0b00001111
_FIT_TOKEN_MASK_MATCH = 0b11110000
# Room needed for the fast path: a 16-byte literal copy plus a 2-byte offset.
_SAFE_INPUT_DISTANCE = 16 + 2
# Room needed in the output: a 16-byte literal copy plus an 18-byte match copy.
_SAFE_OUTPUT_DISTANCE = 16 + 18
# Extra room for a dictionary match that may advance the output up to 17 bytes.
_DICT_EXTRA_DISTANCE = 17


def read_integer(input: bytes, pos: int) -> tuple[int, int]:
    """Read a 255-continued length extension at ``pos``.

    Bytes are summed until one below 255 is read. Returns the sum and the
    position after the last byte consumed.
    """
    total = 0
    while True:
        if pos >= len(input):
            raise ExpectedAnotherByteError()
        extra = input[pos]
        pos += 1
        total += extra
        if extra != 0xFF:
            return total, pos


def read_u16(input: bytes, pos: int) -> tuple[int, int]:
    """Read a little-endian 16-bit integer at ``pos``; return it and the new position."""
    if pos < 0 or pos + 2 > len(input):
        raise ExpectedAnotherByteError()
    return input[pos] | (input[pos + 1] << 8), pos + 2


def does_token_fit(token: int) -> bool:
    """Whether both nibbles of ``token`` are below 15, so no length extension follows."""
    return not (
        (token & _FIT_TOKEN_MASK_LITERAL) == _FIT_TOKEN_MASK_LITERAL
        or (token & _FIT_TOKEN_MASK_MATCH) == _FIT_TOKEN_MASK_MATCH
    )


def _copy_overlapping(output, start: int, pos: int, length: int) -> None:
    """Copy ``length`` bytes from ``start`` to ``pos`` as a forward byte-by-byte copy."""
    distance = pos - start
    if distance == 0:
        # Copying a byte onto itself leaves the buffer unchanged.
        return
    pattern = bytes(output[start:pos])
    repeated = pattern * (length // distance + 1)
    output[pos : pos + length] = repeated[:length]


def _copy_from_dict(output, pos: int, ext_dict: bytes, offset: int, match_length: int) -> int:
    """Copy the part of a match that lies in ``ext_dict``; return how many bytes were copied."""
    dict_offset = len(ext_dict) - (offset - pos)
    if dict_offset < 0:
        raise OffsetOutOfBoundsError()
    dict_match_length = min(match_length, len(ext_dict) - dict_offset)
    output[pos : pos + dict_match_length] = ext_dict[
        dict_offset : dict_offset + dict_match_length
    ]
    return dict_match_length


def _duplicate_slice(output, pos: int, offset: int, match_length: int) -> None:
    start = pos - offset
    if start < 0:
        raise OffsetOutOfBoundsError()
    if match_length > offset:
        _copy_overlapping(output, start, pos, match_length)
    else:
        output[pos : pos + match_length] = bytes(output[start : start + match_length])


def decompress_internal(input: bytes, output, ext_dict: bytes | None, pos: int = 0) -> int:
    """Decode the block ``input`` into the writable buffer ``output`` starting at ``pos``.

    ``output`` has a fixed size, which is its capacity; bytes before ``pos``
    are history that matches may refer to. ``ext_dict`` holds data logically
    preceding ``output``; pass ``None`` to decode without a dictionary.
    Returns the number of bytes written.
    """
    data = bytes(input)
    use_dict = ext_dict is not None
    dictionary = bytes(ext_dict) if use_dict else b""
    capacity = len(output)
    if not 0 <= pos <= capacity:
        raise ValueError(f"start position {pos} is outside the output of size {capacity}")

    initial_pos = pos
    input_pos = 0
    end = len(data)
    safe_input_pos = max(end - _SAFE_INPUT_DISTANCE, 0)
    safe_output_pos = max(capacity - _SAFE_OUTPUT_DISTANCE, 0)
    if use_dict:
        safe_output_pos = max(safe_output_pos - _DICT_EXTRA_DISTANCE, 0)

    while True:
        if input_pos >= end:
            raise ExpectedAnotherByteError()
        token = data[input_pos]
        input_pos += 1

        if does_token_fit(token) and input_pos <= safe_input_pos and pos < safe_output_pos:
            literal_length = token >> 4
            output[pos : pos + literal_length] = data[input_pos : input_pos + literal_length]
            pos += literal_length
            input_pos += literal_length

            offset = data[input_pos] | (data[input_pos + 1] << 8)
            input_pos += 2
            match_length = _MINMATCH + (token & 0xF)

            if use_dict and offset > pos:
                copied = _copy_from_dict(output, pos, dictionary, offset, match_length)
                pos += copied
                if copied == match_length:
                    continue
                match_length -= copied

            start = max(pos - offset, 0)
            if offset >= match_length:
                output[pos : pos + match_length] = bytes(output[start : start + match_length])
            else:
                _copy_overlapping(output, start, pos, match_length)
            pos += match_length
            continue

        literal_length = token >> 4
        if literal_length:
            if literal_length == 15:
                extra, input_pos = read_integer(data, input_pos)
                literal_length += extra
            if literal_length > end - input_pos:
                raise LiteralOutOfBoundsError()
            if literal_length > capacity - pos:
                raise OutputTooSmallError(expected=pos + literal_length, actual=capacity)
            output[pos : pos + literal_length] = data[input_pos : input_pos + literal_length]
            pos += literal_length
            input_pos += literal_length

        if input_pos >= end:
            break

        offset, input_pos = read_u16(data, input_pos)
        match_length = _MINMATCH + (token & 0xF)
        if match_length == _MINMATCH + 15:
            extra, input_pos = read_integer(data, input_pos)
            match_length += extra

        if pos + match_length > capacity:
            raise OutputTooSmallError(expected=pos + match_length, actual=capacity)
        if use_dict and offset > pos:
            copied = _copy_from_dict(output, pos, dictionary, offset, match_length)
            pos += copied
            if copied == match_length:
                continue
            match_length -= copied

        _duplicate_slice(output, pos, offset, match_length)
        pos += match_length

    return pos - initial_pos


def decompress_into(input: bytes, output) -> int:
    """Decode ``input`` into the start of ``output``; return the decoded length."""
    return decompress_internal(input, output, None, 0)


def decompress_into_with_dict(input: bytes, output, ext_dict: bytes) -> int:
    """Decode ``input`` into ``output`` using ``ext_dict``; return the decoded length."""
    return decompress_internal(input, output, ext_dict, 0)


def decompress(input: bytes, min_uncompressed_size: int) -> bytes:
    """Decode ``input``; the output may be at most ``min_uncompressed_size`` bytes."""
    buffer = bytearray(min_uncompressed_size)
    length = decompress_internal(input, buffer, None, 0)
    return bytes(buffer[:length])


def decompress_with_dict(input: bytes, min_uncompressed_size: int, ext_dict: bytes) -> bytes:
    """Decode ``input`` with ``ext_dict``; the output may be at most ``min_uncompressed_size`` bytes."""
    buffer = bytearray(min_uncompressed_size)
    length = decompress_internal(input, buffer, ext_dict, 0)
    return bytes(buffer[:length])


def decompress_size_prepended(input: bytes) -> bytes:
    """Decode a block preceded by its little-endian u32 uncompressed size."""
    size, rest = uncompressed_size(input)
    return decompress(rest, size)


def decompress_size_prepended_with_dict(input: bytes, ext_dict: bytes) -> bytes:
    """Decode a size-prefixed block using ``ext_dict``."""
    size, rest = uncompressed_size(input)
    return decompress_with_dict(rest, size, ext_dict)