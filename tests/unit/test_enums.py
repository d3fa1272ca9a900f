"""Tests for pm_common.enums."""

import pytest

from src.pm_common.enums import LedgerEntryType, MarketState, Outcome, TransferReference
from src.pm_common.errors import InvalidOutcomeError


class TestOutcome:
    @pytest.mark.parametrize("raw", ["YES", "yes", " Yes ", True, Outcome.YES])
    def test_parse_yes(self, raw: object) -> None:
        assert Outcome.parse(raw) is Outcome.YES

    @pytest.mark.parametrize("raw", ["NO", "no", False, Outcome.NO])
    def test_parse_no(self, raw: object) -> None:
        assert Outcome.parse(raw) is Outcome.NO

    @pytest.mark.parametrize("raw", ["", "MAYBE", 1, None, "Y"])
    def test_parse_rejects(self, raw: object) -> None:
        with pytest.raises(InvalidOutcomeError):
            Outcome.parse(raw)

    def test_opposite(self) -> None:
        assert Outcome.YES.opposite() is Outcome.NO
        assert Outcome.NO.opposite() is Outcome.YES

    def test_str_values_match_db_check(self) -> None:
        assert {o.value for o in Outcome} == {"YES", "NO"}


class TestOtherEnums:
    def test_market_states(self) -> None:
        assert [s.value for s in MarketState] == ["OPEN", "CLOSED", "RESOLVED"]

    def test_ledger_entry_types_match_db_check(self) -> None:
        assert {e.value for e in LedgerEntryType} == {
            "DEPOSIT",
            "WITHDRAW",
            "TRANSFER_OUT",
            "TRANSFER_IN",
        }

    def test_transfer_references(self) -> None:
        assert TransferReference.CLAIM_PAYOUT == "CLAIM_PAYOUT"
