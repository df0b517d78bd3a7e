"""Exceptions raised for integrator misuse.

Authentication failures are never raised; ``verify`` reports them as ``False``.
"""

from __future__ import annotations


class Cap1Error(Exception):
    """Base exception for CAP1 signing errors."""


class ConfigurationError(Cap1Error, ValueError):
    """Raised when the caller supplies inputs the protocol cannot sign."""


class MissingHostHeaderError(ConfigurationError):
    """Raised when no ``Host`` header is present on a request to be signed."""

    def __init__(self) -> None:
        super().__init__("Host header not found.")


class InvalidDateError(ConfigurationError):
    """Raised when a supplied ``X-Cap-Date`` is not in ``YYYYMMDDTHHMMSSZ`` form."""
