"""
Version module for tlssig.

Kept separate from ``__init__`` so packaging can read it without importing
the package.
"""

__version__ = "0.3.0"
