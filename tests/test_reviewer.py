# tests/test_reviewer.py
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from google.genai import errors as genai_errors

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from projectreview.config import MAX_PAYLOAD_BYTES, ReviewConfig
from projectreview.core.prompt import SYSTEM_INSTRUCTION, build_prompt, payload_size
from projectreview.errors import (
    ConfigurationMissingError,
    EmptyProjectError,
    ErrorKind,
    PayloadTooLargeError,
    RemoteServiceError,
)
from projectreview.models import AcceptedFile
from projectreview.reviewer import Reviewer, ReviewSession, ReviewState, classify_remote_error


@pytest.fixture
def client():
    mock = MagicMock()
    mock.models.generate_content.return_value = MagicMock(text="Project Review for: demo\n\n## Summary")
    return mock


@pytest.fixture
def reviewer(client):
    return Reviewer(ReviewConfig(api_key="test-key", model="gemini-test"), client=client)


@pytest.fixture
def files():
    return [AcceptedFile("src/a.ts", "export const a = 1;\n"), AcceptedFile("README", "demo\n")]


def files_of_payload(size):
    """One file whose assembled prompt is exactly `size` bytes."""
    overhead = payload_size(build_prompt([AcceptedFile("big.txt", "")], "demo"))
    return [AcceptedFile("big.txt", "x" * (size - overhead))]


def test_successful_review(reviewer, client, files):
    result = reviewer.review(files, "demo")

    assert result.ok
    assert result.text == "Project Review for: demo\n\n## Summary"
    assert reviewer.state == ReviewState.SUCCEEDED

    client.models.generate_content.assert_called_once()
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["contents"] == build_prompt(files, "demo")
    assert kwargs["config"].system_instruction == SYSTEM_INSTRUCTION


def test_missing_project_name_uses_placeholder(reviewer, client, files):
    reviewer.review(files, None)
    contents = client.models.generate_content.call_args.kwargs["contents"]
    assert contents.startswith("Project Name: Unnamed Project\n\n")


def test_missing_api_key_fails_before_anything(client, files):
    reviewer = Reviewer(ReviewConfig(api_key=None), client=client)
    result = reviewer.review(files, "demo")

    assert isinstance(result.error, ConfigurationMissingError)
    assert result.error.kind == ErrorKind.CONFIGURATION_MISSING
    client.models.generate_content.assert_not_called()


def test_empty_file_list_makes_no_call(reviewer, client):
    result = reviewer.review([], "demo")

    assert not result.ok
    assert isinstance(result.error, EmptyProjectError)
    assert result.error.kind == ErrorKind.PRECONDITION_EMPTY
    client.models.generate_content.assert_not_called()


def test_payload_one_byte_over_the_ceiling(reviewer, client):
    result = reviewer.review(files_of_payload(MAX_PAYLOAD_BYTES + 1), "demo")

    assert isinstance(result.error, PayloadTooLargeError)
    assert result.error.size == MAX_PAYLOAD_BYTES + 1
    assert result.error.limit == MAX_PAYLOAD_BYTES
    assert str(MAX_PAYLOAD_BYTES) in result.error.message
    assert reviewer.state == ReviewState.SIZE_REJECTED
    client.models.generate_content.assert_not_called()


def test_payload_one_byte_under_the_ceiling(reviewer, client):
    result = reviewer.review(files_of_payload(MAX_PAYLOAD_BYTES - 1), "demo")

    assert result.ok
    client.models.generate_content.assert_called_once()


def test_payload_ceiling_counts_bytes_not_characters(client):
    reviewer = Reviewer(ReviewConfig(api_key="k", max_payload_bytes=150), client=client)
    # Prompt is 119 characters but 197 bytes
    result = reviewer.review([AcceptedFile("jp.md", "日本語" * 13 + "x")], "p")

    assert isinstance(result.error, PayloadTooLargeError)
    client.models.generate_content.assert_not_called()


@pytest.mark.parametrize("message, kind", [
    ("400 INVALID_ARGUMENT. API key not valid. Please pass a valid API key.", ErrorKind.REMOTE_AUTH_INVALID),
    ("400 Bad Request: request payload size exceeds the limit", ErrorKind.REMOTE_PAYLOAD_REJECTED),
    ("Bad Request - Request Entity Too Large", ErrorKind.REMOTE_PAYLOAD_REJECTED),
    ("503 UNAVAILABLE. The model is overloaded.", ErrorKind.REMOTE_GENERIC_FAILURE),
    ("payload size too big", ErrorKind.REMOTE_GENERIC_FAILURE),
    ("", ErrorKind.UNKNOWN),
])
def test_remote_failures_are_classified(reviewer, client, files, message, kind):
    client.models.generate_content.side_effect = RuntimeError(message)

    result = reviewer.review(files, "demo")

    assert not result.ok
    assert result.error.kind == kind
    assert reviewer.state == ReviewState.FAILED
    client.models.generate_content.assert_called_once()


@pytest.mark.parametrize("error, kind", [
    (
        genai_errors.APIError(413, {"error": {"message": "Request Entity Too Large", "status": "PAYLOAD_TOO_LARGE"}}),
        ErrorKind.REMOTE_PAYLOAD_REJECTED,
    ),
    (
        genai_errors.APIError(400, {"error": {"message": "Request payload size exceeds the limit", "status": "INVALID_ARGUMENT"}}),
        ErrorKind.REMOTE_PAYLOAD_REJECTED,
    ),
    (
        genai_errors.APIError(500, {"error": {"message": "Internal error encountered.", "status": "INTERNAL"}}),
        ErrorKind.REMOTE_GENERIC_FAILURE,
    ),
    (
        genai_errors.APIError(400, {"error": {"message": "API key not valid. Please pass a valid API key.", "status": "INVALID_ARGUMENT"}}),
        ErrorKind.REMOTE_AUTH_INVALID,
    ),
])
def test_sdk_api_errors_are_classified(reviewer, client, files, error, kind):
    client.models.generate_content.side_effect = error

    result = reviewer.review(files, "demo")

    assert result.error.kind == kind


def test_generic_failure_keeps_underlying_message():
    error = classify_remote_error(ConnectionError("connection reset by peer"))

    assert isinstance(error, RemoteServiceError)
    assert error.message == "Failed to get project review feedback: connection reset by peer"


def test_empty_model_response(reviewer, client, files):
    client.models.generate_content.return_value = MagicMock(text=None)
    result = reviewer.review(files, "demo")
    assert result.error.kind == ErrorKind.REMOTE_GENERIC_FAILURE


def test_no_automatic_retry(reviewer, client, files):
    client.models.generate_content.side_effect = TimeoutError("timed out")
    reviewer.review(files, "demo")
    reviewer.review(files, "demo")
    assert client.models.generate_content.call_count == 2


def test_session_rejects_overlapping_review(reviewer, client, files):
    session = ReviewSession(reviewer)
    nested = []

    def generate(**kwargs):
        assert session.busy
        nested.append(session.review(files, "demo"))
        return MagicMock(text="done")

    client.models.generate_content.side_effect = generate

    result = session.review(files, "demo")

    assert result.text == "done"
    assert nested[0].error.kind == ErrorKind.BUSY
    assert client.models.generate_content.call_count == 1
    assert not session.busy
