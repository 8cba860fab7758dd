# splitledger/utils/ledger.py
# -----------------------------------------------------------------------------
# МАТРИЦА ПАРНЫХ ДОЛГОВ (DebtLedger)
# -----------------------------------------------------------------------------
# Семантика:
#   • ledger[a, b] = сколько a ДОЛЖЕН b (может быть < 0 — тогда b должен a).
#   • Матрица кососимметрична: ledger[a, b] == -ledger[b, a]; диагональ не хранится.
#   • Расход: участник доли должен плательщику (кроме доли самого плательщика).
#   • Перевод (COMPLETED settlement) — ПОГАШЕНИЕ долга:
#       from -> to на X уменьшает ledger[from, to] на X (и увеличивает ledger[to, from]).
#   • Матрица не хранится, а пересчитывается по полной истории группы на каждый запрос.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from splitledger.config import get_settings
from splitledger.errors import LedgerInputError, LedgerInvariantError
from splitledger.schemas.expense import Expense
from splitledger.schemas.settlement import Settlement, SettlementStatus
from splitledger.utils.money import ZERO, _D, member_sort_key
from splitledger.utils.splits import check_expense_splits

log = logging.getLogger(__name__)

Pair = Tuple[Hashable, Hashable]


class DebtLedger(Mapping):
    """
    Неизменяемая кососимметричная матрица, ключ — упорядоченная пара (a, b).
    Собирается один раз через build_ledger; для пар из участников группы
    всегда есть значение (ноль, если долгов не было).
    """

    __slots__ = ("_members", "_cells")

    def __init__(self, members: Iterable[Hashable], cells: Dict[Pair, Decimal]):
        self._members: Tuple[Hashable, ...] = tuple(sorted(set(members), key=member_sort_key))
        self._cells = MappingProxyType(dict(cells))

    # --- Mapping ---
    def __getitem__(self, pair: Pair) -> Decimal:
        a, b = pair
        if a == b:
            raise KeyError(pair)
        return self._cells[(a, b)]

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"DebtLedger(members={list(self._members)!r})"

    # --- удобные чтения ---
    @property
    def members(self) -> Tuple[Hashable, ...]:
        return self._members

    def owes(self, debtor: Hashable, creditor: Hashable) -> Decimal:
        """Сколько debtor должен creditor (отрицательное — наоборот)."""
        return self[debtor, creditor]

    def row(self, member_id: Hashable) -> Dict[Hashable, Decimal]:
        """Строка матрицы: {другой участник: сколько member_id ему должен}."""
        if member_id not in self._members:
            raise KeyError(member_id)
        return {other: self._cells[(member_id, other)] for other in self._members if other != member_id}

    def check_skew_symmetry(self) -> None:
        for (a, b), value in self._cells.items():
            if value != -self._cells[(b, a)]:
                raise LedgerInvariantError(
                    f"Матрица не кососимметрична: ledger[{a!r}, {b!r}]={value}, "
                    f"ledger[{b!r}, {a!r}]={self._cells[(b, a)]}"
                )


# =========================
# СБОРКА
# =========================

def _add_debt(cells: Dict[Pair, Decimal], debtor: Hashable, creditor: Hashable, amount: Decimal) -> None:
    # каждое изменение — парой, кососимметричность сохраняется по построению
    cells[(debtor, creditor)] += amount
    cells[(creditor, debtor)] -= amount


def build_ledger(
    member_ids: Iterable[Hashable],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    *,
    strict: Optional[bool] = None,
) -> DebtLedger:
    """
    Строит матрицу парных долгов по расходам и ЗАВЕРШЁННЫМ переводам группы.

    strict=True (по умолчанию из настроек): неизвестный участник, несходящаяся
    сумма долей или перевод самому себе — LedgerInputError.
    strict=False: такие записи пропускаются с предупреждением в лог.
    Порядок обработки на результат не влияет.
    """
    if strict is None:
        strict = get_settings().strict

    members: List[Hashable] = list(dict.fromkeys(member_ids))
    known = set(members)
    cells: Dict[Pair, Decimal] = {
        (a, b): ZERO for a in members for b in members if a != b
    }

    def _reject(msg: str) -> None:
        if strict:
            raise LedgerInputError(msg)
        log.warning("build_ledger: запись пропущена: %s", msg)

    # --------------------
    # Расходы
    # --------------------
    n_expenses = 0
    for expense in expenses:
        payer = expense.paid_by_member_id
        if payer not in known:
            _reject(f"expense {expense.id!r}: плательщик {payer!r} не участник группы")
            continue
        unknown = [s.owed_by_member_id for s in expense.splits if s.owed_by_member_id not in known]
        if unknown:
            _reject(f"expense {expense.id!r}: доли у не-участников {unknown!r}")
            continue
        try:
            check_expense_splits(expense)
        except LedgerInputError as exc:
            if strict:
                raise
            log.warning("build_ledger: запись пропущена: %s", exc)
            continue

        for split in expense.splits:
            debtor = split.owed_by_member_id
            if debtor == payer:
                continue
            amount = _D(split.amount)
            if amount:
                # участник debtor должен плательщику payer
                _add_debt(cells, debtor, payer, amount)
        n_expenses += 1

    # --------------------
    # Переводы (погашение)
    # --------------------
    n_settlements = 0
    for settlement in settlements:
        if settlement.status != SettlementStatus.COMPLETED:
            continue
        sender, receiver = settlement.from_member_id, settlement.to_member_id
        if sender not in known or receiver not in known:
            _reject(f"settlement {settlement.id!r}: участник не из группы ({sender!r} -> {receiver!r})")
            continue
        if sender == receiver:
            _reject(f"settlement {settlement.id!r}: перевод самому себе")
            continue
        # анти-долг: receiver -> sender на amount
        _add_debt(cells, receiver, sender, _D(settlement.amount))
        n_settlements += 1

    ledger = DebtLedger(members, cells)
    log.debug(
        "build_ledger: members=%d expenses=%d settlements=%d",
        len(members), n_expenses, n_settlements,
    )
    return ledger
