"""
Интерфейс внешнего ценового оракула.

Vault потребляет оракул только через этот протокол: внутренний
протокол агрегации цен оракула вне области ответственности vault.
"""

from typing import Protocol, Sequence

from navvault.core.domain.price import PriceReading


class PriceOracleProtocol(Protocol):
    """
    Pull-оракул: данные обновления приносит вызывающий и платит за них fee.

    read_price поднимает StalePrice, если цена старше max_age_sec,
    и OracleReadError, если цены нет. read_price_unsafe возвращает
    последнюю цену без проверки возраста (OracleReadError, если цены нет).
    """

    def get_update_fee(self, update_data: Sequence[bytes]) -> int: ...

    def apply_update(self, update_data: Sequence[bytes], fee: int) -> None: ...

    def read_price(self, max_age_sec: int) -> PriceReading: ...

    def read_price_unsafe(self) -> PriceReading: ...
