"""Assertion helper utilities for tests."""

from __future__ import annotations


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``.

    Raises
    ------
    AssertionError
        If any required key is missing.
    """
    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_error(resp, status: int, code: str, message: str | None = None) -> dict:
    """Check the shared error body and return it.

    Parameters
    ----------
    resp:
        Flask test response.
    status:
        Expected HTTP status.
    code:
        Expected stable error code.
    message:
        Expected ``error`` text, when the test pins it.
    """
    assert resp.status_code == status, resp.get_data(as_text=True)
    body = resp.get_json()
    assert_json_keys(body, {"error", "code", "status", "request_id"})
    assert body["code"] == code
    assert body["status"] == status
    if message is not None:
        assert body["error"] == message
    return body
