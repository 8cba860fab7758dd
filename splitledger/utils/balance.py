# splitledger/utils/balance.py
# -----------------------------------------------------------------------------
# NET-БАЛАНСЫ ПО МАТРИЦЕ ДОЛГОВ
# -----------------------------------------------------------------------------
# Семантика net:
#   • net > 0 — участнику ДОЛЖНЫ; net < 0 — он ДОЛЖЕН.
#   • Всё считаем по строке участника M:
#       gross_owing = Σ max(ledger[M, X], 0)   — сколько M должен другим;
#       gross_owed  = Σ max(-ledger[M, X], 0)  — сколько другие должны M
#                     (по кососимметричности это max(ledger[X, M], 0));
#       net = -Σ ledger[M, X] = gross_owed - gross_owing.
#   • Единственная формула; корректность гарантирует кососимметричность,
#     проверка — Σ net ≈ 0 по группе.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Hashable, Iterable, List, Optional

from splitledger.config import get_settings
from splitledger.errors import LedgerInputError, LedgerInvariantError
from splitledger.schemas.balance import NetBalance, PendingBalance
from splitledger.utils.ledger import DebtLedger
from splitledger.utils.money import ZERO, _eps, member_sort_key

log = logging.getLogger(__name__)


def _epsilon(decimals: Optional[int]) -> Decimal:
    return _eps(get_settings().decimals if decimals is None else decimals)


def aggregate(
    ledger: DebtLedger,
    member_ids: Optional[Iterable[Hashable]] = None,
    *,
    decimals: Optional[int] = None,
) -> List[NetBalance]:
    """
    Сворачивает матрицу в итоги по участникам (в порядке member_ids).
    Если сумма net по группе отклоняется от нуля больше чем на eps — LedgerInvariantError.
    """
    members = list(dict.fromkeys(member_ids)) if member_ids is not None else list(ledger.members)
    others = ledger.members
    unknown = [m for m in members if m not in others]
    if unknown:
        raise LedgerInputError(f"Участники не из матрицы: {unknown!r}")

    out: List[NetBalance] = []
    for m in members:
        owing = ZERO
        owed = ZERO
        for x in others:
            if x == m:
                continue
            value = ledger[m, x]
            if value > 0:
                owing += value
            elif value < 0:
                owed -= value
        out.append(NetBalance(member_id=m, net_balance=owed - owing, gross_owed=owed, gross_owing=owing))

    check_conservation(out, decimals=decimals, complete=set(members) >= set(others))
    return out


def check_conservation(
    balances: Iterable[NetBalance],
    *,
    decimals: Optional[int] = None,
    complete: bool = True,
) -> None:
    """Σ net по ВСЕЙ группе должна быть ≈ 0. Для подмножества участников не проверяется."""
    if not complete:
        return
    total = sum((b.net_balance for b in balances), ZERO)
    if total.copy_abs() > _epsilon(decimals):
        log.error("check_conservation: сумма net-балансов %s != 0", total)
        raise LedgerInvariantError(f"Сумма net-балансов по группе != 0: {total}")


def net_by_member(balances: Iterable[NetBalance]) -> Dict[Hashable, Decimal]:
    return {b.member_id: b.net_balance for b in balances}


def pending_balances(
    ledger: DebtLedger,
    member_id: Hashable,
    *,
    decimals: Optional[int] = None,
) -> List[PendingBalance]:
    """
    Парные балансы участника с каждым из остальных (без неттинга через третьих лиц).
    net_amount = ledger[other, member_id]: > 0 — other должен мне ("owed"), < 0 — я должен ("owes").
    Пары с |net_amount| < eps считаются закрытыми и не попадают в список.
    Сортировка: по |net_amount| по убыванию, затем по id.
    """
    if member_id not in ledger.members:
        raise LedgerInputError(f"Участник {member_id!r} не из матрицы")
    eps = _epsilon(decimals)
    items: List[PendingBalance] = []
    for other in ledger.members:
        if other == member_id:
            continue
        amount = ledger[other, member_id]
        if amount.copy_abs() < eps:
            continue
        items.append(
            PendingBalance(
                member_id=other,
                net_amount=amount,
                direction="owed" if amount > 0 else "owes",
            )
        )
    items.sort(key=lambda it: (-it.net_amount.copy_abs(), member_sort_key(it.member_id)))
    return items


def has_outstanding_debts(ledger: DebtLedger, *, decimals: Optional[int] = None) -> bool:
    """
    Есть ли в группе долги: достаточно, чтобы у ЛЮБОГО участника |net| > eps.
    """
    eps = _epsilon(decimals)
    for balance in aggregate(ledger, decimals=decimals):
        if balance.net_balance.copy_abs() > eps:
            return True
    return False
