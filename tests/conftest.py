from decimal import Decimal

import pytest

from splitledger.config import get_settings
from splitledger.schemas.expense import Expense, ExpenseSplit
from splitledger.schemas.settlement import Settlement, SettlementStatus


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for name in ("LEDGER_DECIMALS", "LEDGER_SETTLE_ALGORITHM", "LEDGER_STRICT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_expense(id, paid_by, amount, shares):
    return Expense(
        id=id,
        paid_by_member_id=paid_by,
        amount=Decimal(str(amount)),
        splits=[ExpenseSplit(owed_by_member_id=uid, amount=Decimal(str(a))) for uid, a in shares.items()],
    )


def make_settlement(id, frm, to, amount, status=SettlementStatus.COMPLETED):
    return Settlement(id=id, from_member_id=frm, to_member_id=to, amount=Decimal(str(amount)), status=status)


@pytest.fixture
def members():
    return ["A", "B", "C"]


@pytest.fixture
def dinner():
    # A платит 90, поровну на троих
    return make_expense(1, "A", "90", {"A": "30", "B": "30", "C": "30"})


@pytest.fixture
def history():
    return [
        make_expense(1, "A", "90", {"A": "30", "B": "30", "C": "30"}),
        make_expense(2, "B", "60", {"A": "20", "B": "20", "C": "20"}),
        make_expense(3, "C", "45.50", {"A": "10.50", "C": "35"}),
        make_expense(4, "D", "100", {"A": "25", "B": "25", "C": "25", "D": "25"}),
    ]
