"""Domain exceptions raised by the quote engine."""

from __future__ import annotations


class QuoteEngineError(Exception):
    """Base exception for the quote engine."""


class QuoteValidationError(QuoteEngineError, ValueError):
    """Input is missing or out of range.

    Always surfaced to the caller, never retried internally.
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class ConfigurationInconsistency(QuoteEngineError):
    """A static rate table cannot serve this request.

    ``table`` and ``key`` identify the offending entry so the table can be
    fixed without re-running the request under a debugger.
    """

    def __init__(self, message: str, table: str, key: object = None):
        super().__init__(message)
        self.table = table
        self.key = key

    def to_dict(self) -> dict:
        return {"error": str(self), "table": self.table, "key": self.key}


class CollaboratorError(QuoteEngineError):
    """An external collaborator (renderer, store, image service) failed.

    Caught and recorded by the delivery step; never fails a quote.
    """
