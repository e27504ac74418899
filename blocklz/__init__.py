"""LZ4 block format compression and decompression in pure Python, with external dictionary support."""

__version__ = "0.1.0"
__all__ = ["compress", "decompress", "errors", "hashtable", "sequences"]