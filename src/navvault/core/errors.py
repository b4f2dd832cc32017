"""
Errors — таксономия ошибок vault

Все ошибки фатальны для вызвавшей их операции: внутренних retry нет,
состояние vault остаётся неизменным (all-or-nothing), вызывающая сторона
должна исправить условие и повторить запрос.

Единственный НЕ фатальный путь — cached-чтение цены оракула, которое при
OracleReadError возвращает fallback-цену 1.0 (см. navvault.oracle.adapter).
"""


class VaultError(Exception):
    """Базовый класс всех ошибок vault."""

    pass


class InvalidInput(VaultError, ValueError):
    """Нулевые/отрицательные суммы, пустые адреса, некорректные параметры."""

    pass


class StalePrice(VaultError):
    """
    Цена оракула старше допустимого порога на fresh-пути чтения.

    Attributes:
        publish_time: Время публикации цены (unix seconds)
        now: Текущее время (unix seconds)
        max_age_sec: Максимально допустимый возраст цены
    """

    def __init__(self, publish_time: int, now: int, max_age_sec: int):
        self.publish_time = publish_time
        self.now = now
        self.max_age_sec = max_age_sec
        super().__init__(
            f"Price published at {publish_time} is {now - publish_time}s old, "
            f"max allowed age is {max_age_sec}s"
        )


class ZeroValuation(VaultError):
    """Стоимость депозита (или всего vault) вычислилась в ноль."""

    pass


class InsufficientLiquidity(VaultError):
    """
    Запрошенная сумма превышает баланс соответствующего актива.

    Attributes:
        asset: Вид актива ("stable" / "volatile")
        requested: Запрошенная сумма (native precision)
        available: Доступный баланс (native precision)
    """

    def __init__(self, asset: str, requested: int, available: int):
        self.asset = asset
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient {asset} liquidity: requested {requested}, available {available}"
        )


class Unauthorized(VaultError):
    """Вызывающий не обладает требуемой ролью."""

    def __init__(self, account: str, role: str):
        self.account = account
        self.role = role
        super().__init__(f"Account {account!r} is missing role {role!r}")


class TransferFailure(VaultError):
    """Перемещение актива или share-токенов не было выполнено."""

    pass


class ReentrantCall(VaultError):
    """Попытка войти в мутирующую операцию, пока другая ещё выполняется."""

    pass


class OracleReadError(VaultError):
    """
    Оракул не смог вернуть цену (нет фида, нет ни одной публикации).

    Поднимается реализациями оракула. Fresh-путь пропагирует её,
    cached-путь заменяет на fallback-цену.
    """

    pass


class OracleUnavailable(VaultError):
    """
    Strict-оценка vault невозможна: cached-чтение ушло в fallback,
    а в vault есть volatile актив, который нельзя оценить по 1:1.
    """

    pass
