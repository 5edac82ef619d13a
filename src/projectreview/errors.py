# src/projectreview/errors.py
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIGURATION_MISSING = "configuration-missing"
    PRECONDITION_EMPTY = "precondition-empty"
    PAYLOAD_TOO_LARGE = "payload-too-large"
    REMOTE_AUTH_INVALID = "remote-auth-invalid"
    REMOTE_PAYLOAD_REJECTED = "remote-payload-rejected"
    REMOTE_GENERIC_FAILURE = "remote-generic-failure"
    UNKNOWN = "unknown"
    BUSY = "busy"


class ReviewError(Exception):
    """Base class for every failure that reaches the caller of a review."""
    kind = ErrorKind.UNKNOWN
    default_message = "An unknown error occurred while fetching project review feedback."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationMissingError(ReviewError):
    kind = ErrorKind.CONFIGURATION_MISSING
    default_message = (
        "Gemini API key is not configured. "
        "Please set the GEMINI_API_KEY (or API_KEY) environment variable."
    )


class EmptyProjectError(ReviewError):
    kind = ErrorKind.PRECONDITION_EMPTY
    default_message = "No files were provided for review. Please select a project with reviewable files."


class PayloadTooLargeError(ReviewError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"The project content ({size / 1024:.0f} KB, {size} bytes) is too large and exceeds "
            f"the processing limit of {limit / 1024:.0f} KB ({limit} bytes). "
            "Please try with a smaller project or select fewer files."
        )


class RemoteAuthError(ReviewError):
    kind = ErrorKind.REMOTE_AUTH_INVALID
    default_message = "Invalid Gemini API Key. Please check your GEMINI_API_KEY (or API_KEY) environment variable."


class RemotePayloadRejectedError(ReviewError):
    kind = ErrorKind.REMOTE_PAYLOAD_REJECTED
    default_message = (
        "The project is too large to be processed by the API. "
        "Please try with a smaller selection of files."
    )


class RemoteServiceError(ReviewError):
    kind = ErrorKind.REMOTE_GENERIC_FAILURE

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Failed to get project review feedback: {detail}")


class UnknownReviewError(ReviewError):
    kind = ErrorKind.UNKNOWN


class ReviewBusyError(ReviewError):
    kind = ErrorKind.BUSY
    default_message = "A review is already in progress. Wait for it to finish before starting another."
