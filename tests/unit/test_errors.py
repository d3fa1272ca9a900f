"""Tests for pm_common.errors and pm_common.response."""

import pytest

from src.pm_common.errors import (
    AlreadyExistsError,
    AppError,
    ArithmeticOverflowError,
    DefectError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidOutcomeError,
    MarketClosedError,
    MarketNotResolvedError,
    MarketResolvedError,
    NotFoundError,
    OwnerOnlyError,
    RateLimitError,
    UnauthorizedError,
)
from src.pm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.reason == "InternalError"

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestTaxonomy:
    @pytest.mark.parametrize(
        ("err", "code", "reason", "status"),
        [
            (OwnerOnlyError(), 100, "OwnerOnly", 403),
            (NotFoundError("market 1"), 101, "NotFound", 404),
            (AlreadyExistsError("username a"), 102, "AlreadyExists", 409),
            (InvalidAmountError("0"), 103, "InvalidAmount", 422),
            (MarketClosedError("closed"), 104, "MarketClosed", 422),
            (MarketResolvedError(1), 105, "MarketResolved", 422),
            (InsufficientFundsError(10, 5), 106, "InsufficientFunds", 422),
            (UnauthorizedError("no"), 107, "Unauthorized", 403),
            (InvalidOutcomeError("MAYBE"), 108, "InvalidOutcome", 422),
            (MarketNotResolvedError(1), 109, "MarketNotResolved", 422),
            (RateLimitError(), 9001, "RateLimited", 429),
            (ArithmeticOverflowError("x"), 9003, "ArithmeticOverflow", 500),
        ],
    )
    def test_code_reason_status(self, err: AppError, code: int, reason: str, status: int) -> None:
        assert (err.code, err.reason, err.http_status) == (code, reason, status)

    def test_insufficient_funds_message(self) -> None:
        err = InsufficientFundsError(required=6500, available=3000)
        assert "6500" in err.message and "3000" in err.message

    def test_overflow_is_defect(self) -> None:
        assert isinstance(ArithmeticOverflowError("x"), DefectError)
        assert not isinstance(MarketClosedError("x"), DefectError)


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"market_id": 1})
        assert resp.code == 0
        assert resp.reason is None
        assert resp.data == {"market_id": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(105, "Market already resolved: 1", "MarketResolved")
        assert resp.code == 105
        assert resp.reason == "MarketResolved"
        assert resp.data is None

    def test_dump_shape(self) -> None:
        dumped = ApiResponse().model_dump()
        assert set(dumped) == {"code", "message", "reason", "data", "timestamp", "request_id"}
