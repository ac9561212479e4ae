"""Client certificate issuer backed by a configured CA."""

__version__ = "0.1.0"
