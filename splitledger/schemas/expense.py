# splitledger/schemas/expense.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Expense / ExpenseSplit (расход и доли участников)
# -----------------------------------------------------------------------------
# Цели:
#   • Снимок расхода, уже проверенный внешним слоем (членство, права).
#   • Сверку суммы долей с amount делаем в utils.splits.check_expense_splits
#     с учётом eps валюты, а не в схеме.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, condecimal

from splitledger.schemas.common import MemberId, Money, PositiveMoney

Percentage = condecimal(ge=0, le=100)


class ExpenseSplit(BaseModel):
    owed_by_member_id: MemberId = Field(..., description="Кто должен эту долю")
    amount: Money = Field(..., description="Сумма доли участника")
    # для split_type='percentage'; у точных сумм может отсутствовать
    percentage: Optional[Percentage] = Field(default=None, description="Доля в процентах")

    model_config = ConfigDict(frozen=True)


class Expense(BaseModel):
    id: Union[int, str]
    paid_by_member_id: MemberId
    amount: PositiveMoney
    splits: List[ExpenseSplit] = Field(default_factory=list)
    title: Optional[str] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)
