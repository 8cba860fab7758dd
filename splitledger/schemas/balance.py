# splitledger/schemas/balance.py
from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict

from splitledger.schemas.common import MemberId


# --------- Итог по участнику ---------
class NetBalance(BaseModel):
    member_id: MemberId
    net_balance: Decimal   # > 0 — участнику должны; < 0 — он должен
    gross_owed: Decimal    # сколько должны ему
    gross_owing: Decimal   # сколько должен он

    model_config = ConfigDict(frozen=True)


# --------- Парный баланс с конкретным участником ---------
class PendingBalance(BaseModel):
    member_id: MemberId                # контрагент
    net_amount: Decimal                # > 0 — контрагент должен мне
    direction: Literal["owed", "owes"]

    model_config = ConfigDict(frozen=True)
