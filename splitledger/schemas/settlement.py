# splitledger/schemas/settlement.py

from __future__ import annotations

import enum
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from splitledger.schemas.common import MemberId, PositiveMoney


class SettlementStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SettleAlgorithm(str, enum.Enum):
    greedy = "greedy"
    pairs = "pairs"


class Settlement(BaseModel):
    """
    Записанный платёж между участниками. В матрицу попадают только COMPLETED.
    """
    id: Union[int, str]
    from_member_id: MemberId
    to_member_id: MemberId
    amount: PositiveMoney
    status: SettlementStatus = SettlementStatus.COMPLETED

    model_config = ConfigDict(frozen=True, from_attributes=True)


class SettlementTransaction(BaseModel):
    """
    Предлагаемый перевод (ещё не записан) для settle-up.
    Используется для выдачи минимального набора переводов между участниками группы.
    """
    from_member_id: MemberId  # кто должен совершить перевод (должник)
    to_member_id: MemberId    # кому перевод предназначен (кредитор)
    amount: PositiveMoney     # сумма перевода (>0, округлена до decimals валюты)

    model_config = ConfigDict(frozen=True)

    def as_settlement(self, id: Union[int, str]) -> Settlement:
        """Превращает предложенный перевод в завершённую запись Settlement."""
        return Settlement(
            id=id,
            from_member_id=self.from_member_id,
            to_member_id=self.to_member_id,
            amount=self.amount,
            status=SettlementStatus.COMPLETED,
        )


class SettlePlan(BaseModel):
    algorithm: SettleAlgorithm
    transactions: List[SettlementTransaction] = Field(default_factory=list)
    total_transactions: int = 0
    total_amount: Decimal = Decimal("0")
    max_possible_transactions: int = 0


class RejectionReason(str, enum.Enum):
    SELF_PAYMENT = "SELF_PAYMENT"
    NON_POSITIVE_AMOUNT = "NON_POSITIVE_AMOUNT"
    WRONG_DIRECTION = "WRONG_DIRECTION"
    OVERPAYMENT = "OVERPAYMENT"


class SettlementDecision(BaseModel):
    """
    Результат проверки ручного платежа. accepted=True — вызывающая сторона
    может записать COMPLETED-settlement ровно на эту сумму.
    """
    accepted: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    outstanding: Decimal = Decimal("0")  # сколько from должен to на момент проверки

    @property
    def ok(self) -> bool:
        return self.accepted
