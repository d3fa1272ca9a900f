"""Unified error codes and custom exceptions.

Every failure carries a numeric ``code`` and a stable ``reason`` string.
The reason strings are the public error taxonomy and are surfaced verbatim.

Code ranges:
  1xx:  Market ledger (OwnerOnly .. MarketNotResolved)
  1xxx: Auth/User
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        reason: str = "InternalError",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.reason = reason
        super().__init__(message)


class DefectError(AppError):
    """Failures that indicate a programming defect rather than a rejected request.

    Logged at ERROR by the API error handler so they can be alerted on separately.
    """


# --- 1xx: Market ledger ---

class OwnerOnlyError(AppError):
    def __init__(self) -> None:
        super().__init__(100, "Only the platform owner may perform this action", 403, "OwnerOnly")


class NotFoundError(AppError):
    def __init__(self, what: str) -> None:
        super().__init__(101, f"Not found: {what}", 404, "NotFound")


class AlreadyExistsError(AppError):
    def __init__(self, what: str) -> None:
        super().__init__(102, f"Already exists: {what}", 409, "AlreadyExists")


class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(103, f"Invalid amount: {detail}", 422, "InvalidAmount")


class MarketClosedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(104, detail, 422, "MarketClosed")


class MarketResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(105, f"Market already resolved: {market_id}", 422, "MarketResolved")


class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            106,
            f"Insufficient funds: required {required}, available {available}",
            422,
            "InsufficientFunds",
        )


class UnauthorizedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(107, detail, 403, "Unauthorized")


class InvalidOutcomeError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(108, f"Invalid outcome: {value!r}", 422, "InvalidOutcome")


class MarketNotResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(109, f"Market not resolved yet: {market_id}", 422, "MarketNotResolved")


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401, "InvalidCredentials")


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403, "AccountDisabled")


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1005, "Refresh token is invalid or expired", 401, "InvalidRefreshToken"
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429, "RateLimited")


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, "InternalError")


class ArithmeticOverflowError(DefectError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Arithmetic overflow: {detail}", 500, "ArithmeticOverflow")
