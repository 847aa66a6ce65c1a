"""Project-wide custom exceptions."""

from __future__ import annotations


class DukaError(Exception):
    """Base exception for the Duka console tooling."""


class ConfigurationError(DukaError):
    """Raised when configuration loading or validation fails."""


class EngineError(DukaError):
    """Raised for failures talking to the remote engine."""


class EngineTransportError(EngineError):
    """Raised when the engine cannot be reached or returns an unreadable reply."""


class TableNotFoundError(EngineError):
    """Raised when the engine reports an unknown table."""


class StatementError(EngineError):
    """Raised when the engine rejects a statement submitted by a form workflow."""


class FormValidationError(DukaError):
    """Raised when structured form input is incomplete."""
