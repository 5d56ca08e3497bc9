"""Tests for the Ok/Err envelope types and status categorization."""

import pytest

from editor.result import ApiError, Err, ErrorKind, Ok, from_response, unwrap

STATUS_CASES = [
    (400, ErrorKind.VALIDATION),
    (422, ErrorKind.VALIDATION),
    (401, ErrorKind.AUTHENTICATION),
    (403, ErrorKind.AUTHORIZATION),
    (404, ErrorKind.NOT_FOUND),
    (409, ErrorKind.CONFLICT),
    (500, ErrorKind.SERVER),
    (503, ErrorKind.SERVER),
    (418, ErrorKind.UNKNOWN),
]


@pytest.mark.parametrize("status,kind", STATUS_CASES)
def test_kind_from_status(status, kind):
    assert ErrorKind.from_status(status) is kind


def test_only_network_and_server_are_retryable():
    retryable = {kind for kind in ErrorKind if kind.retryable}
    assert retryable == {ErrorKind.NETWORK, ErrorKind.SERVER}


def test_ok_payload():
    assert Ok({"session": {"id": "1"}}, "Saved").to_payload() == {
        "success": True,
        "session": {"id": "1"},
        "message": "Saved",
    }
    assert Ok().to_payload() == {"success": True}


def test_err_defaults_and_payload():
    err = Err(ErrorKind.NOT_FOUND)
    assert err.status == 404
    assert err.code == "NOT_FOUND"
    assert err.message == "The requested resource was not found"
    assert err.to_payload() == {
        "success": False,
        "kind": "not_found",
        "code": "NOT_FOUND",
        "message": "The requested resource was not found",
    }

    err = Err(ErrorKind.VALIDATION, "Title is required", {"title": "Title is required"})
    assert err.to_payload()["errors"] == {"title": "Title is required"}
    assert Err(ErrorKind.SERVER, "slow down", status=429).status == 429


def test_from_response_success_strips_envelope_keys():
    result = from_response(201, {"success": True, "user": {"id": "u"}, "message": "Hi"})
    assert isinstance(result, Ok)
    assert result.data == {"user": {"id": "u"}}
    assert result.message == "Hi"
    assert result.status == 201


def test_from_response_prefers_body_kind():
    result = from_response(
        429, {"success": False, "kind": "server", "message": "Rate limit exceeded"}
    )
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.SERVER
    assert result.status == 429


def test_from_response_falls_back_to_status_and_detail():
    result = from_response(403, {"detail": "Not allowed"})
    assert result.kind is ErrorKind.AUTHORIZATION
    assert result.message == "Not allowed"

    result = from_response(502, "not json")
    assert result.kind is ErrorKind.SERVER
    assert result.message == "Server error. Please try again later."

    result = from_response(400, {"success": False, "kind": "bogus", "errors": ["x"]})
    assert result.kind is ErrorKind.VALIDATION
    assert result.field_errors == {}


def test_success_false_on_2xx_is_an_error():
    result = from_response(200, {"success": False, "kind": "conflict", "message": "dup"})
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.CONFLICT


def test_unwrap():
    assert unwrap(Ok({"a": 1})) == {"a": 1}
    with pytest.raises(ApiError) as exc_info:
        unwrap(Err(ErrorKind.CONFLICT, "dup"))
    assert exc_info.value.error.kind is ErrorKind.CONFLICT
    assert str(exc_info.value) == "dup"

    error = ApiError.of(ErrorKind.VALIDATION, field_errors={"title": "bad"})
    assert error.error.field_errors == {"title": "bad"}
    assert error.error.message == "Validation failed"
