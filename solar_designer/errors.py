"""
Error types raised by the production simulator and the design optimizer.

Both errors are raised synchronously and are never retried: they stem from
invalid or unsatisfiable input, not from transient failures. Outer layers
(HTTP routes, CLI) translate them into user-facing responses.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple


class ValidationError(ValueError):
    """
    Raised when an input value is malformed or outside its allowed range.

    Attributes:
        field: Name of the offending input field (e.g. ``"latitude"``).
        message: Human-readable description naming the violated bound.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"error": "validation_error", "field": self.field, "message": self.message}


class InfeasibleDesignError(RuntimeError):
    """
    Raised when no equipment combination yields a usable design variant.

    Attributes:
        attempted: ``(panel_type, inverter_type)`` pairs that were tried.
    """

    def __init__(self, message: str, attempted: Iterable[Tuple[str, str]] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.attempted: List[Tuple[str, str]] = list(attempted)

    def to_dict(self) -> dict:
        return {
            "error": "infeasible_design",
            "message": self.message,
            "attempted": [list(pair) for pair in self.attempted],
        }
