"""Checked fixed-width unsigned integer arithmetic for ledger amounts.

All pools, stakes, balances and fees are non-negative ints. Nothing wraps:
any result outside the unsigned range raises ArithmeticOverflowError and
fails the whole call.

Two widths are used:
  AMOUNT_MAX — anything persisted (BIGINT columns).
  WIDE_MAX   — intermediate products such as bet * losing_pool.
"""

from src.pm_common.errors import ArithmeticOverflowError

AMOUNT_MAX = 2**63 - 1
WIDE_MAX = 2**128 - 1
BPS_DENOMINATOR = 10_000
MAX_FEE_BPS = 1_000  # 10%


def checked_add(a: int, b: int, limit: int = AMOUNT_MAX) -> int:
    result = a + b
    if a < 0 or b < 0 or result > limit:
        raise ArithmeticOverflowError(f"{a} + {b} exceeds {limit}")
    return result


def checked_sub(a: int, b: int) -> int:
    if b < 0 or a < b:
        raise ArithmeticOverflowError(f"{a} - {b} underflows")
    return a - b


def checked_mul(a: int, b: int, limit: int = WIDE_MAX) -> int:
    result = a * b
    if a < 0 or b < 0 or result > limit:
        raise ArithmeticOverflowError(f"{a} * {b} exceeds {limit}")
    return result


def checked_div(a: int, b: int) -> int:
    """Floor division; a zero divisor is a defect, not a rounding case."""
    if b <= 0 or a < 0:
        raise ArithmeticOverflowError(f"{a} / {b} is undefined")
    return a // b


def bps_of(amount: int, rate_bps: int) -> int:
    """floor(amount * rate_bps / 10000)."""
    return checked_div(checked_mul(amount, rate_bps), BPS_DENOMINATOR)
