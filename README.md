# blocklz

A pure-Python implementation of the LZ4 *block* format. It compresses and
decompresses raw LZ4 blocks, with or without an external dictionary, and
uses only the standard library.

## Installation

```
pip install blocklz
```

## Block round trip

The simplest way to use the block format is to prepend the uncompressed size
as a little-endian 32-bit integer. Decompression then knows how much room to
allocate:

```python
from blocklz.compress import compress_prepend_size
from blocklz.decompress import decompress_size_prepended

data = b"Hello people, what's up?"
packed = compress_prepend_size(data)
assert decompress_size_prepended(packed) == data
```

Without the size prefix you have to keep track of the uncompressed length
yourself. Pass it to `decompress` as the largest size the output may have:

```python
from blocklz.compress import compress
from blocklz.decompress import decompress

packed = compress(data)
assert decompress(packed, len(data)) == data
```

If the data decodes to more bytes than that, `OutputTooSmallError` is raised.

## External dictionaries

`compress_with_dict` treats a dictionary of sample data as if it came
directly before the input, so inputs that resemble the sample compress
better. During compression only the last 64 KiB of the dictionary is used,
and a dictionary of three bytes or fewer is ignored. Pass the same dictionary
when you decompress:

```python
from blocklz.compress import compress_with_dict, compress_prepend_size_with_dict
from blocklz.decompress import decompress_with_dict, decompress_size_prepended_with_dict

sample = b"some shared preamble that many messages start with"
packed = compress_with_dict(b"some shared preamble, then more", sample)
restored = decompress_with_dict(packed, 64, sample)

packed = compress_prepend_size_with_dict(b"some shared preamble!", sample)
restored = decompress_size_prepended_with_dict(packed, sample)
```

## Preallocated buffers

`compress_into` and `decompress_into` write into a `bytearray` you provide
and return the number of bytes written. The variants `compress_into_with_dict`
and `decompress_into_with_dict` also take a dictionary. The compression
buffer must hold at least `blocklz.sequences.get_maximum_output_size(len(data))`
bytes, or `CompressError` is raised:

```python
from blocklz.compress import compress_into
from blocklz.decompress import decompress_into
from blocklz.sequences import get_maximum_output_size

out = bytearray(get_maximum_output_size(len(data)))
n = compress_into(data, out)

restored = bytearray(len(data))
m = decompress_into(bytes(out[:n]), restored)
assert bytes(restored[:m]) == data
```

## Lower-level pieces

- `blocklz.compress.compress_internal` appends a compressed block to a
  `bytearray`. You supply the hash table, any prefix already in the input, an
  external dictionary and the logical stream offset.
- `blocklz.decompress.decompress_internal` decodes into a writable buffer
  starting at a given position. Bytes before that position are history that
  matches may refer to. Pass `None` as the dictionary to decode without one.
- `blocklz.hashtable` provides the match-finding tables `HashTable4KU16`,
  `HashTable4K` and `HashTable8K`, and the hash functions `hash4` and `hash5`.
- `blocklz.sequences` provides the token, length-extension and match-scanning
  helpers the compressor is built from.

## Errors

Bad or truncated input raises a subclass of `blocklz.errors.DecompressError`:

| Exception | Meaning |
|---|---|
| `OutputTooSmallError` | The output cannot hold the decoded data. Has `expected` and `actual` attributes. |
| `LiteralOutOfBoundsError` | A literal run extends past the end of the input. |
| `ExpectedAnotherByteError` | The input ends in the middle of a sequence, or is empty. |
| `OffsetOutOfBoundsError` | A back-reference points before the start of the available data. |

`blocklz.errors.CompressError` is raised when a caller-supplied output buffer
is too small for compression.

`blocklz.errors.uncompressed_size(data)` reads the 4-byte size prefix. It
returns the size together with the rest of the input.

## What it does not do

- It handles single blocks only. There is no LZ4 frame format: no magic
  number, no frame headers, no checksums and no streaming reader or writer.
- It has no command-line tool.
- It is written in plain Python, so it is far slower than native LZ4
  libraries.