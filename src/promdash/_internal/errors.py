"""Custom exception hierarchy for PromDash."""

from __future__ import annotations


class PromDashError(Exception):
    """Base exception for all PromDash errors.

    All custom exceptions in PromDash inherit from this class, making it
    easy to catch any PromDash-specific error with a single except clause.
    """


class ConfigError(PromDashError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Required environment variable has an invalid value.
        - Configuration value is out of acceptable range.
    """


class ClientInputError(PromDashError):
    """Raised when an upload request carries unusable input.

    The message is returned verbatim to the client with status 400.

    Examples:
        - The ``metricsFile`` form field is missing.
        - The uploaded text does not look like Prometheus exposition format.
    """


class NotFoundError(PromDashError):
    """Raised when a requested snapshot does not exist (status 404)."""


class BackendError(PromDashError):
    """Raised when the key-value backend cannot be read or written.

    Never handled inside a request; surfaces as a generic server error.
    """
