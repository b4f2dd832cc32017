"""Источник времени (unix seconds). Инжектируется, чтобы тесты были детерминированы."""

import time
from typing import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


class ManualClock:
    """Управляемые часы для тестов и симуляций."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")
        self.now += seconds
        return self.now
