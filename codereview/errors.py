"""
Error taxonomy for the review service.
"""


class ReviewServiceError(Exception):
    """Base class for every error raised by the review service."""


class InvalidInput(ReviewServiceError):
    """Prompt missing, not a string, or blank. Never retried."""


class ConfigurationError(ReviewServiceError):
    """Missing or unusable configuration. Raised once at initialization."""


class TransientUpstreamFailure(ReviewServiceError):
    """Upstream call failed in a way that is worth retrying."""


class EmptyCompletion(TransientUpstreamFailure):
    """Upstream call succeeded but produced no usable text."""


class ExhaustedRetries(ReviewServiceError):
    """Terminal failure after the retry budget is spent."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Upstream call failed after {attempts} attempts: {last_error}"
        )
