"""
Custom exceptions for the import pipeline.

The extraction engine itself never raises; these are raised by decoders and file validation
and converted into ParseError records by the importer.
"""

from typing import Optional


class ResumeEngineError(Exception):
    """Base exception for import pipeline errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion


class DecodeError(ResumeEngineError):
    """Raised when a decoder cannot recover text from the uploaded bytes."""
    pass


class UnsupportedFormatError(ResumeEngineError):
    """Raised when no decoder handles the uploaded file type."""
    pass


class FileValidationError(ResumeEngineError):
    """Raised when an upload is empty, too large or unnamed."""
    pass
