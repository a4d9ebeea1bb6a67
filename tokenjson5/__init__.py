"""Parse JSON5 values from a token stream into plain Python objects."""

__version__ = "0.1.2"

__all__ = ["parser", "tokens"]