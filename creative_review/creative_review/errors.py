"""
Creative review exceptions.

Provides a clear hierarchy for the failures callers need to tell apart:
- CreativeReviewError: Base exception for everything raised by this package
- AnalysisError: Anything that prevented an analysis result from being produced
  - InvalidMediaError: The media payload is not a usable data URI
  - AnalysisModelError: The hosted model could not be reached or refused to answer
  - AnalysisValidationError: The model answered, but not in the expected shape
- UploadInProgressError / OverrideError / PublishError: dashboard-level misuse
"""

from __future__ import annotations

from typing import List, Optional


class CreativeReviewError(Exception):
    """Base exception for all creative review errors."""


class AnalysisError(CreativeReviewError):
    """Failed to produce an analysis result."""

    kind = "analysis_failed"


class InvalidMediaError(AnalysisError):
    """Media payload could not be decoded."""

    kind = "invalid_media"


class AnalysisModelError(AnalysisError):
    """
    The model call itself failed.

    Examples:
    - Network timeout
    - API quota / rate limit
    - Response blocked by the provider's safety filter
    - Empty response
    """

    kind = "model_call_failed"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.provider = provider
        self.cause = cause
        super().__init__(message)


class AnalysisValidationError(AnalysisError):
    """
    Model output did not conform to the analysis schema.

    Examples:
    - Output was not JSON
    - A required field was missing or had the wrong type
    - An enum value outside its closed set
    """

    kind = "schema_validation_failed"

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        raw_output: Optional[str] = None,
    ):
        self.errors = errors or []
        self.raw_output = raw_output
        super().__init__(message)


class UploadInProgressError(CreativeReviewError):
    """An upload is already being analyzed for this session."""


class OverrideError(CreativeReviewError):
    """A reviewer override targeted an unknown field or carried an invalid value."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class PublishError(CreativeReviewError):
    """Publishing could not start (missing asset or platform)."""
