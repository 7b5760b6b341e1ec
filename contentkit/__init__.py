"""contentkit - dynamic content-type and content-entry engine."""

__version__ = "0.1.0"
