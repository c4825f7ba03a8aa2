"""Book Keeper: personal reading tracker backend."""

__version__ = "0.1.0"
