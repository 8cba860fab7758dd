# splitledger/utils/splits.py
# -----------------------------------------------------------------------------
# ПОСТРОЕНИЕ ДОЛЕЙ РАСХОДА
# -----------------------------------------------------------------------------
#   • equal      — поровну, округление до decimals; остаток забирает последний.
#   • percentage — по процентам (сумма 100 ± 0.01); остаток забирает последний.
#   • exact      — точные суммы; процент досчитывается как amount / total * 100.
#   • Проверка: сумма долей == сумме расхода с точностью eps.
# -----------------------------------------------------------------------------

from __future__ import annotations

from decimal import Decimal, ROUND_DOWN
from typing import Dict, Hashable, List, Mapping, Optional, Sequence

from splitledger.config import get_settings
from splitledger.errors import LedgerInputError
from splitledger.schemas.expense import Expense, ExpenseSplit
from splitledger.utils.money import ZERO, _D, _eps, _round

HUNDRED = Decimal("100")
PERCENT_EPS = Decimal("0.01")


def _decimals(decimals: Optional[int]) -> int:
    return get_settings().decimals if decimals is None else decimals


def _percent_of(amount: Decimal, total: Decimal) -> Decimal:
    return _round(amount / total * HUNDRED, 4)


def _positive_total(total) -> Decimal:
    total = _D(total)
    if total <= 0:
        raise LedgerInputError(f"Сумма расхода должна быть > 0, получено {total}")
    return total


def equal_splits(
    total,
    member_ids: Sequence[Hashable],
    *,
    decimals: Optional[int] = None,
) -> List[ExpenseSplit]:
    total = _positive_total(total)
    decs = _decimals(decimals)
    members = list(dict.fromkeys(member_ids))
    if not members:
        raise LedgerInputError("Нет участников для деления расхода")

    per = _round(total / len(members), decs, rounding=ROUND_DOWN)
    amounts = {uid: per for uid in members}
    # округляем вниз, остаток — последнему (доля не уходит в минус)
    last = members[-1]
    amounts[last] = _round(total - per * (len(members) - 1), decs)

    return [
        ExpenseSplit(owed_by_member_id=uid, amount=amt, percentage=_percent_of(amt, total))
        for uid, amt in amounts.items()
    ]


def percentage_splits(
    total,
    percentages: Mapping[Hashable, object],
    *,
    decimals: Optional[int] = None,
) -> List[ExpenseSplit]:
    total = _positive_total(total)
    decs = _decimals(decimals)
    if not percentages:
        raise LedgerInputError("Нет участников для деления расхода")

    pcts = {uid: _D(p) for uid, p in percentages.items()}
    for uid, p in pcts.items():
        if p < 0 or p > HUNDRED:
            raise LedgerInputError(f"Процент участника {uid!r} вне диапазона 0..100: {p}")
    pct_sum = sum(pcts.values(), ZERO)
    if (pct_sum - HUNDRED).copy_abs() > PERCENT_EPS:
        raise LedgerInputError(f"Сумма процентов должна быть 100, получено {pct_sum}")

    members = list(pcts)
    amounts: Dict[Hashable, Decimal] = {
        uid: _round(total * pcts[uid] / HUNDRED, decs) for uid in members[:-1]
    }
    amounts[members[-1]] = _round(total - sum(amounts.values(), ZERO), decs)
    if amounts[members[-1]] < 0:
        raise LedgerInputError("Доли по процентам превышают сумму расхода")

    return [
        ExpenseSplit(owed_by_member_id=uid, amount=amounts[uid], percentage=pcts[uid])
        for uid in members
    ]


def exact_splits(
    total,
    amounts: Mapping[Hashable, object],
    *,
    decimals: Optional[int] = None,
) -> List[ExpenseSplit]:
    total = _positive_total(total)
    decs = _decimals(decimals)
    if not amounts:
        raise LedgerInputError("Нет участников для деления расхода")

    splits: List[ExpenseSplit] = []
    running = ZERO
    for uid, raw in amounts.items():
        amt = _round(_D(raw), decs)
        if amt < 0:
            raise LedgerInputError(f"Доля участника {uid!r} отрицательная: {amt}")
        running += amt
        splits.append(ExpenseSplit(owed_by_member_id=uid, amount=amt, percentage=_percent_of(amt, total)))

    if (running - total).copy_abs() > _eps(decs):
        raise LedgerInputError(f"Сумма долей ({running}) != сумме расхода ({total})")
    return splits


def check_expense_splits(expense: Expense, *, decimals: Optional[int] = None) -> None:
    """
    Сумма долей должна совпадать с суммой расхода (с точностью eps),
    иначе матрица получится несогласованной.
    """
    eps = _eps(_decimals(decimals))
    if not expense.splits:
        raise LedgerInputError(f"expense {expense.id!r}: нет ни одной доли")

    split_sum = sum((_D(s.amount) for s in expense.splits), ZERO)
    if (split_sum - _D(expense.amount)).copy_abs() > eps:
        raise LedgerInputError(
            f"expense {expense.id!r}: сумма долей ({split_sum}) != сумме расхода ({expense.amount})"
        )

    pcts = [_D(s.percentage) for s in expense.splits if s.percentage is not None]
    if pcts and len(pcts) == len(expense.splits):
        pct_sum = sum(pcts, ZERO)
        if (pct_sum - HUNDRED).copy_abs() > PERCENT_EPS * len(pcts):
            raise LedgerInputError(
                f"expense {expense.id!r}: сумма процентов ({pct_sum}) != 100"
            )
