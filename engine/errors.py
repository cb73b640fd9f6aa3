# engine/errors.py
from __future__ import annotations


class EngineError(ValueError):
    """Base class for failures raised inside the arithmetic engine."""


class ParseError(EngineError):
    """Malformed literal, unbalanced parentheses or an unknown operator."""


class IllegalOperation(EngineError):
    """An operation the exercise rules do not allow (e.g. a negative difference)."""


class DivisionByZero(IllegalOperation, ZeroDivisionError):
    pass


class ExhaustionWarning(UserWarning):
    """Batch generation hit its attempt cap before reaching the requested count."""
