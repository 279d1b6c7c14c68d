"""Error taxonomy shared by the query, catalog and HTTP layers."""

from __future__ import annotations


class ResortInfoError(Exception):
    """Base class for expected, caller-facing failures."""


class InvalidArgument(ResortInfoError):
    """A required field is missing or a value is out of range."""


class NotFound(ResortInfoError):
    """A resort directory or source file does not exist."""
