import pytest
from hypothesis import given, strategies as st

from blocklz.hashtable import (
    HashTable4K,
    HashTable4KU16,
    HashTable8K,
    get_batch,
    get_batch_arch,
    hash4,
    hash5,
)


def _all_tables():
    return [HashTable4KU16(), HashTable4K(), HashTable8K()]


@given(st.integers(min_value=0, max_value=2**32 - 1), st.binary(max_size=8))
def test_get_batch_roundtrip(value, prefix):
    data = prefix + value.to_bytes(4, "little") + b"\xff"
    assert get_batch(data, len(prefix)) == value


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_get_batch_arch_roundtrip(value):
    assert get_batch_arch(value.to_bytes(8, "little"), 0) == value


def test_get_batch_out_of_range():
    with pytest.raises(IndexError):
        get_batch(b"\x01\x02\x03", 0)
    with pytest.raises(IndexError):
        get_batch_arch(b"\x00" * 10, 4)


def test_hash_of_zero():
    assert hash4(0) == 0
    assert hash5(0) == 0


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_hash4_fits_16_bits(seq):
    assert 0 <= hash4(seq) < 1 << 16


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_hash5_fits_16_bits(seq):
    assert 0 <= hash5(seq) < 1 << 16


@given(st.integers(min_value=0, max_value=2**64 - 1), st.integers(min_value=0, max_value=255))
def test_hash5_ignores_top_bytes(seq, top):
    # Only the low five bytes take part in the hash.
    low = seq & ((1 << 40) - 1)
    assert hash5(low | (top << 56)) == hash5(low)


@given(
    hash_value=st.integers(min_value=0, max_value=0xFFFF),
    val=st.integers(min_value=0, max_value=0xFFFF),
)
def test_put_get_roundtrip(hash_value, val):
    for table in (HashTable4KU16(), HashTable4K(), HashTable8K()):
        table.put_at(hash_value, val)
        assert table.get_at(hash_value) == val


def test_new_table_is_zeroed_and_clear_resets():
    for table in (HashTable4KU16(), HashTable4K(), HashTable8K()):
        assert table.get_at(0xFFFF) == 0
        table.put_at(0xFFFF, 1234)
        table.put_at(0, 99)
        assert table.get_at(0xFFFF) == 1234
        table.clear()
        assert table.get_at(0xFFFF) == 0
        assert table.get_at(0) == 0


def test_u16_table_truncates_values():
    table = HashTable4KU16()
    table.put_at(42, 0x10000 + 7)
    assert table.get_at(42) == 7


def test_u32_table_keeps_large_values():
    table = HashTable4K()
    table.put_at(42, 0x10000 + 7)
    assert table.get_at(42) == 0x10000 + 7


def test_slot_sharing_by_shift():
    table4k = HashTable4K()
    table4k.put_at(16, 5)
    assert table4k.get_at(31) == 5
    assert table4k.get_at(32) == 0

    table8k = HashTable8K()
    table8k.put_at(8, 9)
    assert table8k.get_at(15) == 9
    assert table8k.get_at(16) == 0


def test_table_sizes():
    assert len(HashTable4KU16()) == 4 * 1024
    assert len(HashTable4K()) == 4 * 1024
    assert len(HashTable8K()) == 8 * 1024


def test_reposition_saturates():
    table = HashTable4K()
    table.put_at(0, 10)
    table.put_at(0xFFFF, 30)
    table.reposition(20)
    assert table.get_at(0) == 0
    assert table.get_at(0xFFFF) == 10


def test_hash_at_u16_uses_four_bytes():
    data = b"abcdXYZW"
    other = b"abcdQRST"
    table = HashTable4KU16()
    assert table.hash_at(data, 0) == table.hash_at(other, 0)
    assert table.hash_at(data, 0) == hash4(get_batch(data, 0))


def test_hash_at_wide_uses_five_bytes():
    table = HashTable4K()
    assert table.hash_at(b"abcdeXYZ", 0) == table.hash_at(b"abcdeQRS", 0)
    assert table.hash_at(b"abcdeXYZ", 0) == hash5(get_batch_arch(b"abcdeXYZ", 0))
    assert HashTable8K().hash_at(b"abcdeXYZ", 0) == table.hash_at(b"abcdeXYZ", 0)


@given(data=st.binary(min_size=8, max_size=64))
def test_hash_at_indexes_within_table(data):
    for table in _all_tables():
        h = table.hash_at(data, 0)
        assert 0 <= h < 1 << 16
        table.put_at(h, 3)
        assert table.get_at(h) == 3