"""Tests for bk_common.errors and bk_common.response."""

from src.bk_common.errors import (
    AppError,
    AutoBookNotCancellableError,
    AutoBookNotFoundError,
    DuplicateAutoBookError,
    EventNotBookableError,
    EventNotFoundError,
    EventNotReleasableError,
    InvalidCredentialsError,
    OperatorRequiredError,
    ProcessingPassError,
    TicketsNotReleasedError,
    UpstreamError,
)
from src.bk_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=4999, message="Pass failed")
        assert err.code == 4999
        assert err.message == "Pass failed"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_event_not_found(self) -> None:
        err = EventNotFoundError("evt-1")
        assert (err.code, err.http_status) == (2001, 404)
        assert "evt-1" in err.message

    def test_event_not_bookable(self) -> None:
        err = EventNotBookableError("evt-1", "SOLD_OUT")
        assert (err.code, err.http_status) == (2002, 422)
        assert "SOLD_OUT" in err.message

    def test_auto_book_errors(self) -> None:
        assert AutoBookNotFoundError("ab").http_status == 404
        assert DuplicateAutoBookError("evt").http_status == 409
        assert AutoBookNotCancellableError("ab", "SUCCESS").code == 3003
        assert TicketsNotReleasedError("evt").code == 3004

    def test_operator_required(self) -> None:
        assert OperatorRequiredError().http_status == 403

    def test_processing_pass_error(self) -> None:
        err = ProcessingPassError("db down")
        assert (err.code, err.http_status) == (4001, 503)
        assert "db down" in err.message

    def test_upstream_error_is_not_app_error(self) -> None:
        assert not issubclass(UpstreamError, AppError)

    def test_codes_stay_in_documented_ranges(self) -> None:
        errors = [
            InvalidCredentialsError(),
            OperatorRequiredError(),
            EventNotFoundError("e"),
            EventNotBookableError("e", "LIVE"),
            EventNotReleasableError("e"),
            AutoBookNotFoundError("a"),
            DuplicateAutoBookError("e"),
            AutoBookNotCancellableError("a", "FAILED"),
            TicketsNotReleasedError("e"),
            ProcessingPassError("x"),
        ]
        for err in errors:
            assert 1000 <= err.code < 5000


class TestResponse:
    def test_success_response(self) -> None:
        resp = success_response({"k": "v"})
        assert isinstance(resp, ApiResponse)
        assert resp.code == 0
        assert resp.data == {"k": "v"}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(2001, "Event not found")
        assert resp.code == 2001
        assert resp.data is None
