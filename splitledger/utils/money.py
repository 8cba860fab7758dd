# splitledger/utils/money.py
# -----------------------------------------------------------------------------
# ДЕНЕЖНЫЕ ХЕЛПЕРЫ
# -----------------------------------------------------------------------------
#   • Все суммы — Decimal (без float-дрейфа).
#   • Округление — ROUND_HALF_UP до decimals валюты.
#   • eps — порог «практически ноль»: не менее 1e-2, зависит от decimals.
# -----------------------------------------------------------------------------

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Hashable, Tuple

ZERO = Decimal("0")


def _D(x: Any) -> Decimal:
    # пустое значение из внешнего слоя — ноль; float идёт через str, без двоичного хвоста
    if x is None:
        return ZERO
    return x if isinstance(x, Decimal) else Decimal(str(x))


def _q(decimals: int) -> Decimal:
    # шаг округления валюты: 1 для decimals <= 0, иначе 10^-decimals
    return Decimal(1).scaleb(-max(decimals, 0))


def _round(d: Any, decimals: int, *, rounding: str = ROUND_HALF_UP) -> Decimal:
    return _D(d).quantize(_q(decimals), rounding=rounding)


def _eps(decimals: int) -> Decimal:
    # «практически ноль» — один шаг валюты, но не грубее 0.01
    return _q(max(decimals, 2))


def member_sort_key(member_id: Hashable) -> Tuple[bool, Any]:
    # id бывают int и str; строки после чисел, внутри типа — естественный порядок
    return (isinstance(member_id, str), member_id)
