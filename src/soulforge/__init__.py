"""Mutable-world core of the Soulforge Saga."""

__version__ = "0.1.0"
