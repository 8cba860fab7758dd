# splitledger/services/group_ledger.py
# -----------------------------------------------------------------------------
# РАСЧЁТЫ ПО СНИМКУ ГРУППЫ
# -----------------------------------------------------------------------------
# Внешний слой (БД/роуты) одним запросом достаёт участников, расходы и переводы
# группы и передаёт сюда снимок. Здесь — только чистые вычисления:
#   • матрица долгов, итоги по участникам, парные балансы «мне/я»;
#   • план settle-up (greedy | pairs);
#   • проверка ручного платежа перед записью settlement.
# Ничего не пишем и не храним: на каждый вызов матрица строится заново.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from splitledger.schemas.balance import NetBalance, PendingBalance
from splitledger.schemas.common import MemberId
from splitledger.schemas.expense import Expense
from splitledger.schemas.settlement import (
    SettleAlgorithm,
    Settlement,
    SettlementDecision,
    SettlementStatus,
    SettlePlan,
)
from splitledger.utils.balance import aggregate, has_outstanding_debts, pending_balances
from splitledger.utils.guards import validate_settlement
from splitledger.utils.ledger import DebtLedger, build_ledger
from splitledger.utils.settle import build_settle_plan

log = logging.getLogger(__name__)


class GroupSnapshot(BaseModel):
    """Согласованный снимок группы (участники + расходы + переводы одним чтением)."""
    member_ids: List[MemberId]
    expenses: List[Expense] = Field(default_factory=list)
    settlements: List[Settlement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def completed_settlements(self) -> List[Settlement]:
        return [s for s in self.settlements if s.status == SettlementStatus.COMPLETED]


def group_ledger(snapshot: GroupSnapshot, *, strict: Optional[bool] = None) -> DebtLedger:
    ledger = build_ledger(
        snapshot.member_ids,
        snapshot.expenses,
        snapshot.completed_settlements(),
        strict=strict,
    )
    ledger.check_skew_symmetry()
    return ledger


def member_balances(snapshot: GroupSnapshot) -> List[NetBalance]:
    """Итоги по всем участникам группы: net / сколько должны ему / сколько должен он."""
    return aggregate(group_ledger(snapshot), snapshot.member_ids)


def pending_balances_for(snapshot: GroupSnapshot, member_id: MemberId) -> List[PendingBalance]:
    """Незакрытые парные балансы участника с остальными (по убыванию суммы)."""
    return pending_balances(group_ledger(snapshot), member_id)


def settle_plan(
    snapshot: GroupSnapshot,
    *,
    algorithm: Union[str, SettleAlgorithm, None] = None,
) -> SettlePlan:
    plan = build_settle_plan(group_ledger(snapshot), snapshot.member_ids, algorithm=algorithm)
    log.info(
        "settle_plan: members=%d algorithm=%s transactions=%d total=%s",
        len(snapshot.member_ids), plan.algorithm.value, plan.total_transactions, plan.total_amount,
    )
    return plan


def group_has_debts(snapshot: GroupSnapshot) -> bool:
    return has_outstanding_debts(group_ledger(snapshot))


def check_payment(
    snapshot: GroupSnapshot,
    from_member_id: MemberId,
    to_member_id: MemberId,
    amount,
) -> SettlementDecision:
    """
    Проверка платежа from -> to по актуальной матрице. При accepted=True
    вызывающая сторона записывает COMPLETED-settlement ровно на amount.
    """
    decision = validate_settlement(group_ledger(snapshot), from_member_id, to_member_id, amount)
    if not decision.accepted:
        log.info(
            "check_payment: отказ %s -> %s на %s: %s",
            from_member_id, to_member_id, amount, decision.reason.value,
        )
    return decision
