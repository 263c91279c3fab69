"""
Exceptions for panelscore.

Recoverable conditions (abstentions, unknown raters, unreadable history)
never raise; they log a warning and return a defined value. The exceptions
below cover the cases a caller has to act on.
"""

from typing import Optional


class PanelScoreError(Exception):
    """Base exception for panelscore errors."""
    pass


class HistoryWriteError(PanelScoreError):
    """Raised when an updated history document could not be persisted."""
    
    def __init__(self, message: str, subject_id: str = "", cause: Optional[Exception] = None):
        super().__init__(message)
        self.subject_id = subject_id
        self.cause = cause


class RaterPayloadError(PanelScoreError):
    """
    Raised when a rater payload cannot be turned into a RaterOutput.
    
    Wraps the underlying pydantic ValidationError in ``cause``.
    """
    
    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
