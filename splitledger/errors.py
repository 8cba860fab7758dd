# splitledger/errors.py
# Ошибки ядра. Отказ в платеже (settle) ошибкой НЕ является — см. SettlementDecision.

from __future__ import annotations


class LedgerError(Exception):
    """Базовая ошибка расчётов."""


class LedgerInputError(LedgerError, ValueError):
    """
    Некорректные входные данные: неизвестный участник, сумма долей не сходится
    с суммой расхода, перевод самому себе и т.п.
    """


class LedgerInvariantError(LedgerError):
    """Нарушен инвариант матрицы (кососимметричность / сумма net != 0)."""
