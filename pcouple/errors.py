"""Error types raised by the relaxation engine."""

from __future__ import annotations


class RelaxationError(Exception):
    """Base class for relaxation failures."""


class UnsupportedInputError(RelaxationError, ValueError):
    """Query the engine cannot answer, e.g. non-monotonic time marching."""


class InsufficientHistoryError(RelaxationError):
    """Extrapolation requested with fewer than two recorded points."""


class InvariantViolationError(RelaxationError, RuntimeError):
    """Internal bookkeeping mismatch."""
