# splitledger/config.py
# Настройки ядра расчётов: точность валюты, алгоритм settle-up, строгий режим, логирование.
# Читаем из окружения (.env подхватывается через python-dotenv), как и DATABASE_URL в бэкенде.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    decimals: int = 2
    settle_algorithm: str = "greedy"
    strict: bool = True
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} должен быть целым числом, получено: {raw!r}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Снимок настроек из окружения. Кэшируется; в тестах сбрасывать через get_settings.cache_clear().
    """
    return Settings(
        decimals=_env_int("LEDGER_DECIMALS", 2),
        settle_algorithm=(os.getenv("LEDGER_SETTLE_ALGORITHM") or "greedy").lower().strip(),
        strict=(os.getenv("LEDGER_STRICT", "1").lower().strip() in _TRUE),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper().strip(),
    )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
