"""
Настройки из переменных окружения.

Значения читаются один раз при импорте модуля, поэтому переменные
окружения нужно выставить до ``import lambda_lab.config``. Для тестов
есть ``Settings.from_env()``, который перечитывает окружение.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SEED_PATH = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "data", "seed.json")
)


@dataclass(frozen=True)
class Settings:
    seed_path: str = DEFAULT_SEED_PATH
    log_level: str = "INFO"
    log_file: Optional[str] = None
    high_value_threshold: float = 100.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            seed_path=env.get("LAMBDA_LAB_SEED_PATH", DEFAULT_SEED_PATH),
            log_level=env.get("LAMBDA_LAB_LOG_LEVEL", "INFO"),
            log_file=env.get("LAMBDA_LAB_LOG_FILE") or None,
            high_value_threshold=float(
                env.get("LAMBDA_LAB_HIGH_VALUE_THRESHOLD", "100.0")
            ),
        )


settings = Settings.from_env()
