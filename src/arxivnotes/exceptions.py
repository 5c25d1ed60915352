"""Custom exceptions for arxiv-notes."""


class ArxivNotesError(Exception):
    """Base exception for the project."""


class ConfigError(ArxivNotesError):
    """Raised when required configuration is missing or invalid."""


class InvalidInputError(ArxivNotesError):
    """Raised when user input cannot be used for a request."""


class InvalidIdentifierError(InvalidInputError):
    """Raised when no arXiv identifier can be extracted."""


class InvalidUrlError(InvalidInputError):
    """Raised when a URL is not an arXiv abstract-page URL."""


class UpstreamError(ArxivNotesError):
    """Raised when a required registry returns an error or malformed payload."""


class SubmissionError(ArxivNotesError):
    """Raised when the summarization service rejects a job."""


class PollError(ArxivNotesError):
    """Raised when polling a summarization job fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SummaryTimeoutError(ArxivNotesError):
    """Raised when a summarization job is still pending after the last status request."""


class CapabilityUnavailable(ArxivNotesError):
    """Raised when the document store lacks a required editing capability."""
