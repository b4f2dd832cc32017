"""
PriceReading — Модель чтения цены оракула

Immutable Pydantic модель, представляющая сырой ответ оракула:
знаковая мантисса, доверительный интервал, знаковая экспонента и время
публикации.
Эфемерна: читается на каждый вызов и не хранится в состоянии vault.
"""

from pydantic import BaseModel, Field


class PriceReading(BaseModel):
    """
    Сырое чтение цены: actual_price = price * 10**exponent.

    Мантисса может быть отрицательной — такая цена считается невалидной
    и превращается в 0 при масштабировании (см. scale_oracle_price).
    """

    price: int = Field(..., description="Знаковая мантисса цены")
    conf: int = Field(0, ge=0, description="Доверительный интервал (± в той же экспоненте)")
    exponent: int = Field(..., description="Знаковая десятичная экспонента")
    publish_time: int = Field(..., ge=0, description="Время публикации (unix seconds)")

    model_config = {"frozen": True}

    def age(self, now: int) -> int:
        """Возраст цены в секундах относительно now (может быть < 0 при skew)."""
        return now - self.publish_time

    def is_stale(self, now: int, max_age_sec: int) -> bool:
        """True если цена старше max_age_sec."""
        return self.age(now) > max_age_sec
