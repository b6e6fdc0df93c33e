"""Friend graph and feed visibility backend."""

__version__ = "0.1.0"
