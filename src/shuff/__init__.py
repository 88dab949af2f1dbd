"""shuff: static Huffman compression of byte streams."""

__version__ = "0.1.0"
