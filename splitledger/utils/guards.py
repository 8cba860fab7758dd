# splitledger/utils/guards.py
# ПРОВЕРКА РУЧНОГО ПЛАТЕЖА ПЕРЕД ЗАПИСЬЮ settlement.
# Отказ — не исключение, а SettlementDecision с кодом причины; текст для UI формирует вызывающий.

from __future__ import annotations

from typing import Hashable, Optional

from splitledger.config import get_settings
from splitledger.errors import LedgerInputError
from splitledger.schemas.settlement import RejectionReason, SettlementDecision
from splitledger.utils.ledger import DebtLedger
from splitledger.utils.money import ZERO, _D, _eps


def _reject(reason: RejectionReason, message: str, outstanding=ZERO) -> SettlementDecision:
    return SettlementDecision(accepted=False, reason=reason, message=message, outstanding=outstanding)


def validate_settlement(
    ledger: DebtLedger,
    from_member_id: Hashable,
    to_member_id: Hashable,
    amount,
    *,
    decimals: Optional[int] = None,
) -> SettlementDecision:
    """
    Можно ли from_member_id заплатить to_member_id сумму amount:
      • не самому себе;
      • amount > 0;
      • from действительно должен to (ledger[from, to] >= 0);
      • amount не больше долга (+ eps).
    """
    if from_member_id == to_member_id:
        return _reject(RejectionReason.SELF_PAYMENT, "Нельзя перевести деньги самому себе")

    amount = _D(amount)
    if amount <= 0:
        return _reject(RejectionReason.NON_POSITIVE_AMOUNT, "Сумма платежа должна быть больше нуля")

    try:
        outstanding = ledger[from_member_id, to_member_id]
    except KeyError:
        raise LedgerInputError(
            f"Участники {from_member_id!r} / {to_member_id!r} не из матрицы группы"
        )

    if outstanding < 0:
        return _reject(
            RejectionReason.WRONG_DIRECTION,
            "Этот участник сам должен вам — платить ему не нужно",
            outstanding,
        )

    eps = _eps(get_settings().decimals if decimals is None else decimals)
    if amount > outstanding + eps:
        return _reject(
            RejectionReason.OVERPAYMENT,
            f"Сумма платежа ({amount}) превышает долг ({outstanding})",
            outstanding,
        )

    return SettlementDecision(accepted=True, outstanding=outstanding)
