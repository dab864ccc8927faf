"""XFS disk image tools and SPL compiler helpers for the XOS teaching system."""

__version__ = "0.1.0"