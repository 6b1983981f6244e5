"""Tests for error types."""

from nix_cli.errors import ApiError, NixCliError, ServerStartError, SessionErrorInfo, UsageError


class TestSessionErrorInfo:
    def test_from_payload(self):
        info = SessionErrorInfo.from_payload({"name": "ProviderAuthError", "data": {"message": "bad key"}})
        assert info == SessionErrorInfo(name="ProviderAuthError", message="bad key")
        assert info.describe() == "ProviderAuthError: bad key"

    def test_missing_message(self):
        info = SessionErrorInfo.from_payload({"name": "MessageAbortedError"})
        assert info is not None
        assert info.describe() == "MessageAbortedError"

    def test_not_an_error_object(self):
        assert SessionErrorInfo.from_payload(None) is None
        assert SessionErrorInfo.from_payload("boom") is None
        assert SessionErrorInfo.from_payload({"data": {"message": "no name"}}) is None


class TestApiError:
    def test_from_named_error_body(self):
        err = ApiError.from_response(400, {"name": "BadRequest", "data": {"message": "missing title"}})
        assert err.status == 400
        assert str(err) == "HTTP 400: BadRequest: missing title"

    def test_from_message_body(self):
        err = ApiError.from_response(404, {"message": "session not found"})
        assert str(err) == "HTTP 404: session not found"

    def test_from_text_body(self):
        assert str(ApiError.from_response(500, "Internal Server Error")) == "HTTP 500: Internal Server Error"

    def test_from_empty_body(self):
        assert str(ApiError.from_response(502, "")) == "HTTP 502: request failed"

    def test_transport_error_has_no_status(self):
        err = ApiError("connection refused")
        assert err.status is None
        assert str(err) == "connection refused"


class TestHierarchy:
    def test_all_derive_from_base(self):
        assert issubclass(UsageError, NixCliError)
        assert issubclass(ServerStartError, NixCliError)
        assert issubclass(ApiError, NixCliError)

    def test_usage_error_keeps_message(self):
        assert UsageError("Usage: x").message == "Usage: x"
