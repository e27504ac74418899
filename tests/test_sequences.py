import pytest
from hypothesis import given, strategies as st

from blocklz.decompress import read_integer
from blocklz.sequences import (
    backtrack_match,
    count_same_bytes,
    get_maximum_output_size,
    token_from_literal,
    token_from_literal_and_match_length,
    write_integer,
)


@pytest.mark.parametrize(
    "first, second, expected",
    [
        (
            [1, 2, 3, 4] * 4 + [0] * 12,
            [1, 2, 3, 4] * 4 + [1] * 12,
            16,
        ),
        (
            [1, 2, 3, 4] * 5 + [0] * 12,
            [1, 2, 3, 4] * 5 + [1] * 12,
            20,
        ),
        (
            [1, 2, 3, 4] * 5 + [3, 4] + [0] * 12,
            [1, 2, 3, 4] * 5 + [3, 4] + [1] * 12,
            22,
        ),
        (
            [1, 2, 3, 4] * 5 + [3, 4, 5] + [0] * 12,
            [1, 2, 3, 4] * 5 + [3, 4, 5] + [1] * 12,
            23,
        ),
        (
            [1, 2, 3, 4] * 5 + [3, 4, 5] + [0] * 12,
            [1, 2, 3, 4] * 5 + [3, 4, 6] + [1] * 12,
            22,
        ),
        (
            [1, 2, 3, 4] * 5 + [3, 9, 5] + [0] * 12,
            [1, 2, 3, 4] * 5 + [3, 4, 6] + [1] * 12,
            21,
        ),
    ],
)
def test_count_same_bytes_aligned_blocks(first, second, expected):
    assert count_same_bytes(bytes(first), 0, bytes(second), 0) == expected


def test_count_same_bytes_every_difference_position():
    first = bytes(i % 255 for i in range(100 + 12))
    for diff_idx in range(8, 100):
        second = bytearray(first)
        second[diff_idx] = 255
        for start in range(diff_idx + 1):
            assert count_same_bytes(first, start, bytes(second), start) == diff_idx - start


def test_count_same_bytes_ignores_trailing_literals():
    data = b"a" * 20
    assert count_same_bytes(data, 0, data, 0) == 14


def test_count_same_bytes_limited_by_source():
    assert count_same_bytes(b"a" * 30, 0, b"aaa", 0) == 3


def test_count_same_bytes_cursor_in_tail_returns_zero():
    data = b"a" * 10
    assert count_same_bytes(data, 8, data, 0) == 0


@pytest.mark.parametrize(
    "lit_len, expected",
    [(0, 0x00), (1, 0x10), (14, 0xE0), (15, 0xF0), (1000, 0xF0)],
)
def test_token_from_literal(lit_len, expected):
    assert token_from_literal(lit_len) == expected


@pytest.mark.parametrize(
    "lit_len, match_len, expected",
    [(0, 0, 0x00), (3, 5, 0x35), (14, 14, 0xEE), (15, 2, 0xF2), (2, 15, 0x2F), (99, 99, 0xFF)],
)
def test_token_from_literal_and_match_length(lit_len, match_len, expected):
    assert token_from_literal_and_match_length(lit_len, match_len) == expected


@pytest.mark.parametrize(
    "n, encoded",
    [
        (0, b"\x00"),
        (254, b"\xfe"),
        (255, b"\xff\x00"),
        (256, b"\xff\x01"),
        (510, b"\xff\xff\x00"),
    ],
)
def test_write_integer(n, encoded):
    out = bytearray(b"x")
    write_integer(out, n)
    assert bytes(out) == b"x" + encoded


def test_write_integer_rejects_negative():
    with pytest.raises(ValueError):
        write_integer(bytearray(), -1)


@given(st.integers(min_value=0, max_value=200_000))
def test_write_integer_round_trips_through_read_integer(n):
    out = bytearray()
    write_integer(out, n)
    value, pos = read_integer(bytes(out) + b"\x07", 0)
    assert value == n
    assert pos == len(out)


def test_backtrack_match_extends_backwards():
    data = b"xyzabcdxyzabcd"
    assert backtrack_match(data, 10, 7, data, 3) == (7, 0)


def test_backtrack_match_stops_at_literal_start():
    data = b"xyzabcdxyzabcd"
    assert backtrack_match(data, 10, 9, data, 3) == (9, 2)


def test_backtrack_match_stops_on_mismatch():
    data = b"qyzabcdxyzabcd"
    src = b"wyzabcd"
    assert backtrack_match(data, 10, 0, src, 3) == (8, 1)


def test_backtrack_match_no_change_when_bytes_differ():
    assert backtrack_match(b"abcd", 2, 0, b"xyzd", 2) == (2, 2)


@pytest.mark.parametrize("n, expected", [(0, 20), (100, 130), (1000, 1120)])
def test_get_maximum_output_size(n, expected):
    assert get_maximum_output_size(n) == expected


@given(st.integers(min_value=0, max_value=10**7))
def test_get_maximum_output_size_exceeds_input(n):
    assert get_maximum_output_size(n) > n