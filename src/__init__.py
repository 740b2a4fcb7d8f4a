# src/__init__.py — v1
"""avidiag — poultry health diagnosis gateway."""

from avidiag.version import __version__

__all__ = ["__version__"]
