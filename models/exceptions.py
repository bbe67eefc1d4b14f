"""
Custom exceptions for the keystroke analysis pipeline.
"""


class KeystrokeAnalysisError(Exception):
    """Base class for all keystroke-analysis exceptions."""


class AlignmentInputError(KeystrokeAnalysisError, TypeError):
    """Raised when the aligner is handed something other than a token list."""


class SessionStateError(KeystrokeAnalysisError):
    """Raised on an illegal typing-session state transition."""


class PersistError(KeystrokeAnalysisError):
    """Raised when the persistence collaborator fails to store a payload."""
