# splitledger/schemas/common.py
# Общие типы схем: идентификатор участника и денежные поля.

from __future__ import annotations

from typing import Union

from pydantic import condecimal

# Непрозрачный id участника: ядро его только сравнивает и хэширует.
MemberId = Union[int, str]

# Денежное поле без фиксированного decimal_places — масштаб даёт точность валюты.
Money = condecimal(max_digits=18, ge=0)
PositiveMoney = condecimal(max_digits=18, gt=0)
