"""ShareLedger — fungible ledger shares в памяти процесса."""

from collections import defaultdict

from navvault.core.errors import TransferFailure
from navvault.core.math.numerical_safeguards import validate_account, validate_positive_amount


class ShareLedger:
    """Стандартная mint/burn семантика fungible-токена, без transfer."""

    def __init__(self, name: str = "Vault Share", symbol: str = "VSH"):
        self.name = name
        self.symbol = symbol
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._total_supply = 0

    def mint(self, account: str, amount: int) -> None:
        validate_account(account)
        validate_positive_amount(amount, "mint amount")
        self._balances[account] += amount
        self._total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        validate_account(account)
        validate_positive_amount(amount, "burn amount")
        balance = self._balances.get(account, 0)
        if amount > balance:
            raise TransferFailure(f"Cannot burn {amount} shares of {account!r}, balance {balance}")
        self._balances[account] = balance - amount
        self._total_supply -= amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply
