"""Ethereum ABI type parsing, input coercion, encoding and serialization."""

__version__ = "0.1.0"