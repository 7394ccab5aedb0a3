"""
Exceptions raised by probmonad.

Both concrete errors subclass the matching builtin so that callers catching
`ValueError` or `TypeError` keep working.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ProbMonadError(Exception):
    """Base exception for all probmonad errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidParameterError(ProbMonadError, ValueError):
    """A distribution parameter or weight list is outside its valid domain."""


class TypeConstraintError(ProbMonadError, TypeError):
    """A sampled value or operand does not support the requested numeric operation."""
