"""Index and verify content-hash pointers published through the ENS registry."""

__version__ = "0.1.0"
