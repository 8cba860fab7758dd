# splitledger/utils/settle.py
# -----------------------------------------------------------------------------
# АЛГОРИТМЫ ВЫДАЧИ ПЛАНА (SETTLE-UP)
# -----------------------------------------------------------------------------
#   1) "greedy" — минимум переводов: сведение должников и кредиторов по net
#      (два курсора; переводов не больше, чем участников - 1).
#   2) "pairs"  — парные долги «как в матрице» (без неттинга через третьих лиц).
# План — чистая функция от входа; порядок при равных суммах — по id участника.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Hashable, Iterable, List, Optional, Union

from splitledger.config import get_settings
from splitledger.errors import LedgerInputError
from splitledger.schemas.balance import NetBalance
from splitledger.schemas.settlement import SettleAlgorithm, SettlementTransaction, SettlePlan
from splitledger.utils.balance import aggregate
from splitledger.utils.ledger import DebtLedger
from splitledger.utils.money import ZERO, _eps, _round, member_sort_key

log = logging.getLogger(__name__)


def _decimals(decimals: Optional[int]) -> int:
    return get_settings().decimals if decimals is None else decimals


def optimize(
    net_balances: Iterable[NetBalance],
    *,
    decimals: Optional[int] = None,
) -> List[SettlementTransaction]:
    """
    Жадный settle-up по net-балансам.
    Возвращает список переводов должник -> кредитор.
    """
    decs = _decimals(decimals)
    eps = _eps(decs)
    balances = list(net_balances)

    creditors = sorted(
        [(b.member_id, b.net_balance) for b in balances if b.net_balance > eps],
        key=lambda x: (-x[1], member_sort_key(x[0])),
    )
    debtors = sorted(
        [(b.member_id, -b.net_balance) for b in balances if b.net_balance < -eps],
        key=lambda x: (-x[1], member_sort_key(x[0])),
    )

    settlements: List[SettlementTransaction] = []
    i, j = 0, 0
    while i < len(debtors) and j < len(creditors):
        debtor_id, debt_abs = debtors[i]
        creditor_id, credit_abs = creditors[j]

        # сравниваем и вычитаем НЕокруглённую сумму; округляется только выданный перевод
        amount = min(debt_abs, credit_abs)

        if amount > eps:
            settlements.append(
                SettlementTransaction(
                    from_member_id=debtor_id,
                    to_member_id=creditor_id,
                    amount=_round(amount, decs),
                )
            )
            debtors[i] = (debtor_id, debt_abs - amount)
            creditors[j] = (creditor_id, credit_abs - amount)

        # сдвигаем только закрытые курсоры (хотя бы один всегда закрыт: amount — минимум)
        if debtors[i][1] <= eps:
            i += 1
        if creditors[j][1] <= eps:
            j += 1

    return settlements


def pairwise_settle_up(
    ledger: DebtLedger,
    *,
    decimals: Optional[int] = None,
) -> List[SettlementTransaction]:
    """
    Парные долги: по одному переводу на каждую пару с ненулевым ledger[a, b].
    """
    decs = _decimals(decimals)
    eps = _eps(decs)

    members = ledger.members  # уже отсортированы по id
    settlements: List[SettlementTransaction] = []
    for i, a in enumerate(members):
        for b in members[i + 1:]:
            diff = ledger[a, b]
            amt = _round(diff.copy_abs(), decs)
            if amt <= eps:
                continue
            if diff > 0:
                item = SettlementTransaction(from_member_id=a, to_member_id=b, amount=amt)
            else:
                item = SettlementTransaction(from_member_id=b, to_member_id=a, amount=amt)
            settlements.append(item)

    settlements.sort(key=lambda it: (member_sort_key(it.from_member_id), member_sort_key(it.to_member_id)))
    return settlements


def _algorithm(algorithm: Union[str, SettleAlgorithm, None]) -> SettleAlgorithm:
    if isinstance(algorithm, SettleAlgorithm):
        return algorithm
    raw = (algorithm or get_settings().settle_algorithm or "greedy").lower().strip()
    try:
        return SettleAlgorithm(raw)
    except ValueError:
        raise LedgerInputError(f"Неизвестный алгоритм settle-up: {raw!r} (ожидается greedy|pairs)")


def build_settle_plan(
    ledger: DebtLedger,
    member_ids: Optional[Iterable[Hashable]] = None,
    *,
    algorithm: Union[str, SettleAlgorithm, None] = None,
    decimals: Optional[int] = None,
) -> SettlePlan:
    """
    Считает план «рассчитаться всем» выбранным алгоритмом (по умолчанию — из настроек).
    """
    algo = _algorithm(algorithm)
    members = list(dict.fromkeys(member_ids)) if member_ids is not None else list(ledger.members)

    if algo is SettleAlgorithm.pairs:
        transactions = pairwise_settle_up(ledger, decimals=decimals)
    else:
        transactions = optimize(aggregate(ledger, members, decimals=decimals), decimals=decimals)

    total: Decimal = sum((t.amount for t in transactions), ZERO)
    log.debug("build_settle_plan: algorithm=%s transactions=%d total=%s", algo.value, len(transactions), total)
    return SettlePlan(
        algorithm=algo,
        transactions=transactions,
        total_transactions=len(transactions),
        total_amount=total,
        max_possible_transactions=max(len(members) - 1, 0),
    )
