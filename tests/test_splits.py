from decimal import Decimal

import pytest

from splitledger.errors import LedgerInputError
from splitledger.schemas.expense import Expense
from splitledger.utils.splits import (
    check_expense_splits,
    equal_splits,
    exact_splits,
    percentage_splits,
)


def amounts(splits):
    return {s.owed_by_member_id: s.amount for s in splits}


def test_equal_splits_last_member_takes_remainder():
    splits = equal_splits("100", ["A", "B", "C"])

    assert amounts(splits) == {"A": Decimal("33.33"), "B": Decimal("33.33"), "C": Decimal("33.34")}
    assert sum(s.percentage for s in splits) == Decimal("100")


def test_equal_splits_never_negative():
    splits = equal_splits("0.04", [1, 2, 3, 4, 5, 6])

    assert all(s.amount >= 0 for s in splits)
    assert sum(s.amount for s in splits) == Decimal("0.04")


def test_equal_splits_respects_decimals():
    splits = equal_splits("1000", ["A", "B", "C"], decimals=0)

    assert amounts(splits) == {"A": Decimal("333"), "B": Decimal("333"), "C": Decimal("334")}


def test_percentage_splits():
    splits = percentage_splits("250", {"A": "50", "B": "30", "C": "20"})

    assert amounts(splits) == {"A": Decimal("125.00"), "B": Decimal("75.00"), "C": Decimal("50.00")}
    assert [s.percentage for s in splits] == [Decimal("50"), Decimal("30"), Decimal("20")]


def test_percentage_splits_must_total_hundred():
    with pytest.raises(LedgerInputError):
        percentage_splits("100", {"A": "50", "B": "40"})
    with pytest.raises(LedgerInputError):
        percentage_splits("100", {"A": "150", "B": "-50"})


def test_exact_splits_fill_percentage():
    splits = exact_splits("80", {"A": "20", "B": "60"})

    assert [s.percentage for s in splits] == [Decimal("25.0000"), Decimal("75.0000")]


def test_exact_splits_must_match_total():
    with pytest.raises(LedgerInputError):
        exact_splits("80", {"A": "20", "B": "50"})


def test_non_positive_total():
    with pytest.raises(LedgerInputError):
        equal_splits("0", ["A"])


def test_check_expense_splits():
    ok = Expense(id=1, paid_by_member_id="A", amount=Decimal("10"), splits=equal_splits("10", ["A", "B", "C"]))
    check_expense_splits(ok)

    off = Expense(id=2, paid_by_member_id="A", amount=Decimal("10"), splits=equal_splits("9.5", ["A", "B"]))
    with pytest.raises(LedgerInputError):
        check_expense_splits(off)

    empty = Expense(id=3, paid_by_member_id="A", amount=Decimal("10"))
    with pytest.raises(LedgerInputError):
        check_expense_splits(empty)
