"""
Unit tests for the escrow ledger.

Tests cover:
1. Additive credits
2. Bounded debits
3. Draining
4. Conservation of funds
5. Snapshot / restore
"""

import pytest

from lazyauction.core import EscrowLedger, InsufficientEscrow

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20


class TestCredit:

    def test_unknown_participant_is_zero(self):
        assert EscrowLedger().balance_of(ALICE) == 0

    def test_credits_accumulate(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 4)
        assert ledger.credit(ALICE, 6) == 10
        assert ledger.balance_of(ALICE) == 10

    def test_address_case_does_not_split_balances(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 4)
        ledger.credit(ALICE.upper().replace("0X", "0x"), 1)
        assert ledger.balance_of(ALICE) == 5

    def test_negative_credit_rejected(self):
        with pytest.raises(ValueError):
            EscrowLedger().credit(ALICE, -1)


class TestDebit:

    def test_debit_reduces_balance(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 10)
        assert ledger.debit(ALICE, 6) == 4

    def test_overdraw_rejected_without_change(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 3)
        with pytest.raises(InsufficientEscrow):
            ledger.debit(ALICE, 4)
        assert ledger.balance_of(ALICE) == 3
        assert ledger.released == 0


class TestDrain:

    def test_drain_returns_and_zeroes(self):
        ledger = EscrowLedger()
        ledger.credit(BOB, 5)
        assert ledger.drain(BOB) == 5
        assert ledger.balance_of(BOB) == 0

    def test_second_drain_returns_zero(self):
        ledger = EscrowLedger()
        ledger.credit(BOB, 5)
        ledger.drain(BOB)
        assert ledger.drain(BOB) == 0

    def test_drain_unknown_participant(self):
        assert EscrowLedger().drain(BOB) == 0


class TestConservation:

    def test_held_plus_released_equals_deposited(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 4)
        ledger.credit(ALICE, 6)
        ledger.credit(BOB, 5)
        ledger.debit(ALICE, 6)
        ledger.drain(BOB)
        assert ledger.total_held + ledger.released == ledger.deposited
        assert ledger.participants() == {ALICE: 4}


class TestSnapshot:

    def test_restore_discards_later_changes(self):
        ledger = EscrowLedger()
        ledger.credit(ALICE, 4)
        snap = ledger.snapshot()
        ledger.credit(BOB, 7)
        ledger.drain(ALICE)
        ledger.restore(snap)
        assert ledger.balance_of(ALICE) == 4
        assert ledger.balance_of(BOB) == 0
        assert ledger.deposited == 4
        assert ledger.released == 0
