"""Exceptions raised by dfa_engine. Executor and validator verdicts are never raised."""


class DFAEngineError(Exception):
    """Base class for errors raised by dfa_engine."""
    pass


class DFAFormatError(DFAEngineError, ValueError):
    """Raised when a DFA document cannot be decoded."""
    pass
