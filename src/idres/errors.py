"""Error types for the identity resolution engine.

Only configuration problems are raised. Per-record problems are reported
as typed outcomes (see ErrorKind) so that partial results stay usable.
"""

from enum import Enum


class IdresError(Exception):
    """Base class for engine errors."""


class ConfigurationError(IdresError):
    """Raised when a static vocabulary or registry is malformed.

    Surfaces at construction time, never per call.
    """


class ErrorKind(str, Enum):
    """Per-record outcome codes reported alongside successful results."""

    INVALID_INPUT = "invalid_input"
    THRESHOLD_REJECTED = "threshold_rejected"
