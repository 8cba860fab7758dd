from decimal import Decimal

import pytest

from splitledger.errors import LedgerInputError
from splitledger.schemas.settlement import RejectionReason
from splitledger.utils.guards import validate_settlement
from splitledger.utils.ledger import build_ledger


@pytest.fixture
def ledger(members, dinner):
    return build_ledger(members, [dinner], [])


def test_accepts_payment_within_debt(ledger):
    decision = validate_settlement(ledger, "B", "A", "20")

    assert decision.ok
    assert decision.reason is None
    assert decision.outstanding == Decimal("30")


def test_accepts_full_payment(ledger):
    assert validate_settlement(ledger, "C", "A", Decimal("30")).accepted


def test_rejects_self_payment(ledger):
    decision = validate_settlement(ledger, "A", "A", "10")

    assert not decision.accepted
    assert decision.reason is RejectionReason.SELF_PAYMENT


@pytest.mark.parametrize("amount", ["0", "-5"])
def test_rejects_non_positive_amount(ledger, amount):
    assert validate_settlement(ledger, "B", "A", amount).reason is RejectionReason.NON_POSITIVE_AMOUNT


def test_rejects_wrong_direction(ledger):
    decision = validate_settlement(ledger, "A", "B", "10")

    assert decision.reason is RejectionReason.WRONG_DIRECTION
    assert decision.outstanding == Decimal("-30")


def test_rejects_overpayment(ledger):
    decision = validate_settlement(ledger, "B", "A", "30.02")

    assert decision.reason is RejectionReason.OVERPAYMENT
    assert decision.message


def test_overpayment_tolerates_epsilon(ledger):
    assert validate_settlement(ledger, "B", "A", "30.01").accepted


def test_zero_debt_only_allows_epsilon(ledger):
    assert validate_settlement(ledger, "B", "C", "5").reason is RejectionReason.OVERPAYMENT


def test_unknown_member_is_input_error(ledger):
    with pytest.raises(LedgerInputError):
        validate_settlement(ledger, "B", "Z", "5")
