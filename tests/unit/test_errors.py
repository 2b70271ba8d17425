"""Tests for wl_common.errors and wl_common.response."""

from src.wl_common.errors import (
    AppError,
    AuthError,
    ConflictError,
    InvariantError,
    NotFoundError,
    ValidationError,
)
from src.wl_common.response import error_response, success_response


class TestAppError:
    def test_base_error_defaults_to_bad_request(self) -> None:
        err = AppError("Something broke")
        assert err.message == "Something broke"
        assert err.http_status == 400

    def test_is_exception(self) -> None:
        assert isinstance(AppError("test"), Exception)


class TestStatusClassification:
    def test_not_found(self) -> None:
        assert NotFoundError().http_status == 404

    def test_auth(self) -> None:
        err = AuthError()
        assert err.http_status == 403
        assert err.message == "Authentication required"

    def test_generic_bad_request(self) -> None:
        for err in (
            ValidationError("bad name"),
            ConflictError("taken"),
            InvariantError("last member"),
        ):
            assert isinstance(err, AppError)
            assert err.http_status == 400


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}

    def test_error(self) -> None:
        resp = error_response(404, "404")
        assert resp.code == 404
        assert resp.data is None

    def test_serialization(self) -> None:
        d = success_response({"balance": 5}).model_dump()
        assert set(d) == {"code", "message", "data", "timestamp", "request_id"}

    def test_timestamp_is_utc_z(self) -> None:
        assert success_response().timestamp.endswith("Z")

    def test_fresh_request_id_without_request(self) -> None:
        first, second = success_response(), error_response(400, "bad")
        assert first.request_id.startswith("req_")
        assert first.request_id != second.request_id
