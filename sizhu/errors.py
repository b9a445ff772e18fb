"""
Error types raised by the chart computation core.

Both are deterministic rejections of bad input, never transient failures,
so callers should surface them rather than retry.
"""


class BaziError(Exception):
    """Base class for every error raised by sizhu."""


class InvalidInputError(BaziError, ValueError):
    """
    Malformed date-time, unknown stem/branch symbol, bad location numbers,
    or an hour that matches none of the twelve two-hour slots.
    """


class UnsupportedLocationError(BaziError, LookupError):
    """Named location is not in the gazetteer, or no timezone covers the coordinates."""
