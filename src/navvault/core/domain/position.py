"""
UserPosition — Модель позиции пользователя в vault

Immutable Pydantic модель. Все изменения позиции создают новый экземпляр
(with_deposit / with_withdrawal), поэтому откат операции сводится к
восстановлению предыдущего экземпляра.

Позиция создаётся при первом депозите и никогда не удаляется:
при обнулении shares она помечается неактивной, а накопленные
contribution-поля сохраняются для исторических запросов.
"""

from pydantic import BaseModel, Field, model_validator

from .units import AssetKind


class UserPosition(BaseModel):
    """
    Позиция одного аккаунта.

    Инвариант: active == (shares > 0).
    """

    account: str = Field(..., min_length=1, description="Идентификатор аккаунта")
    shares: int = Field(0, ge=0, description="Shares (18 знаков)")
    stable_contributed: int = Field(
        0, ge=0, description="Суммарно внесённый stable asset (6 знаков)"
    )
    volatile_contributed: int = Field(
        0, ge=0, description="Суммарно внесённый volatile asset (18 знаков)"
    )
    first_deposit_time: int = Field(..., ge=0, description="Время первого депозита (unix s)")
    last_deposit_time: int = Field(..., ge=0, description="Время последнего депозита (unix s)")
    active: bool = Field(True, description="Есть ли у аккаунта shares")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_active_flag(self) -> "UserPosition":
        """Флаг active должен соответствовать наличию shares."""
        if self.active != (self.shares > 0):
            raise ValueError(
                f"active={self.active} inconsistent with shares={self.shares}"
            )
        if self.last_deposit_time < self.first_deposit_time:
            raise ValueError(
                f"last_deposit_time {self.last_deposit_time} before "
                f"first_deposit_time {self.first_deposit_time}"
            )
        return self

    @classmethod
    def opened(cls, account: str, now: int) -> "UserPosition":
        """Пустая позиция до применения первого депозита."""
        return cls(
            account=account,
            shares=0,
            first_deposit_time=now,
            last_deposit_time=now,
            active=False,
        )

    def with_deposit(self, kind: AssetKind, amount: int, shares: int, now: int) -> "UserPosition":
        """Новая позиция после депозита."""
        new_shares = self.shares + shares
        update: dict = {
            "shares": new_shares,
            "last_deposit_time": now,
            "active": new_shares > 0,
        }
        if kind is AssetKind.STABLE:
            update["stable_contributed"] = self.stable_contributed + amount
        else:
            update["volatile_contributed"] = self.volatile_contributed + amount
        return self.model_validate(self.model_dump() | update)

    def with_withdrawal(self, shares: int) -> "UserPosition":
        """Новая позиция после сжигания shares; contribution-поля не меняются."""
        if shares > self.shares:
            raise ValueError(f"Cannot burn {shares} shares, position holds {self.shares}")
        new_shares = self.shares - shares
        return self.model_validate(
            self.model_dump() | {"shares": new_shares, "active": new_shares > 0}
        )
