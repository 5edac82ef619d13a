# src/projectreview/reviewer.py
"""
One review = one Gemini call.

Reviewer.review() assembles the prompt, enforces the payload ceiling and
issues a single generate_content request. Every failure comes back as a
ReviewResult carrying a ReviewError; nothing is retried.
"""
import logging
import threading
from enum import Enum
from typing import Optional, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from projectreview.config import ReviewConfig
from projectreview.core.prompt import SYSTEM_INSTRUCTION, build_prompt, payload_size
from projectreview.errors import (
    ConfigurationMissingError,
    EmptyProjectError,
    PayloadTooLargeError,
    RemoteAuthError,
    RemotePayloadRejectedError,
    RemoteServiceError,
    ReviewBusyError,
    ReviewError,
    UnknownReviewError,
)
from projectreview.models import AcceptedFile, ReviewRequest, ReviewResult

logger = logging.getLogger(__name__)

AUTH_SIGNATURE = "API key not valid"
PAYLOAD_SIGNATURES = ("payload size", "request entity too large")


class ReviewState(str, Enum):
    IDLE = "idle"
    ASSEMBLING = "assembling"
    SIZE_REJECTED = "size_rejected"
    CALLING = "calling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def classify_remote_error(exc: BaseException) -> ReviewError:
    """Maps a failure of the generate_content call onto a ReviewError."""
    if isinstance(exc, ReviewError):
        return exc

    message = str(exc)
    if not message:
        return UnknownReviewError()

    if AUTH_SIGNATURE in message:
        return RemoteAuthError()

    lowered = message.lower()
    is_bad_request = "400" in message or "bad request" in lowered
    if isinstance(exc, genai_errors.APIError) and exc.code in (400, 413):
        is_bad_request = True
    if is_bad_request and any(sig in lowered for sig in PAYLOAD_SIGNATURES):
        return RemotePayloadRejectedError()

    return RemoteServiceError(message)


class Reviewer:
    def __init__(self, config: ReviewConfig, client: Optional[genai.Client] = None):
        self.config = config
        self.client = client
        self.state = ReviewState.IDLE

    def _set_state(self, state: ReviewState):
        logger.debug("review state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _get_client(self) -> genai.Client:
        if self.client is None:
            self.client = genai.Client(api_key=self.config.api_key)
        return self.client

    def review(self, files: Sequence[AcceptedFile], project_name: Optional[str] = None) -> ReviewResult:
        self.state = ReviewState.IDLE
        request = ReviewRequest(files=files, project_name=project_name)
        try:
            text = self._run(request)
        except ReviewError as e:
            if self.state != ReviewState.SIZE_REJECTED:
                self._set_state(ReviewState.FAILED)
            return ReviewResult.failure(e)

        self._set_state(ReviewState.SUCCEEDED)
        return ReviewResult.success(text)

    def _run(self, request: ReviewRequest) -> str:
        if not self.config.api_key:
            raise ConfigurationMissingError()
        if not request.files:
            raise EmptyProjectError()

        self._set_state(ReviewState.ASSEMBLING)
        prompt = build_prompt(request.files, request.project_name)
        size = payload_size(prompt)
        limit = self.config.max_payload_bytes
        if size > limit:
            logger.warning("Project content is %d bytes, over the %d byte limit", size, limit)
            self._set_state(ReviewState.SIZE_REJECTED)
            raise PayloadTooLargeError(size, limit)

        self._set_state(ReviewState.CALLING)
        logger.info(
            "Requesting review of %d file(s) (%d bytes) from %s",
            len(request.files), size, self.config.model,
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=types.GenerateContentConfig(system_instruction=SYSTEM_INSTRUCTION),
            )
        except Exception as e:
            logger.error("Error fetching project review from Gemini API: %s", e)
            raise classify_remote_error(e) from e

        if response.text is None:
            raise RemoteServiceError("the model returned an empty response")
        return response.text


class ReviewSession:
    """Allows at most one review in flight; a concurrent call fails fast."""

    def __init__(self, reviewer: Reviewer):
        self.reviewer = reviewer
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def review(self, files: Sequence[AcceptedFile], project_name: Optional[str] = None) -> ReviewResult:
        if not self._lock.acquire(blocking=False):
            return ReviewResult.failure(ReviewBusyError())
        try:
            return self.reviewer.review(files, project_name)
        finally:
            self._lock.release()
