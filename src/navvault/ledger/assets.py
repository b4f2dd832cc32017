"""
AssetLedger — балансы одного актива в памяти процесса.

Vault держит средства на собственном аккаунте (vault_account);
transfer_in/transfer_out перемещают их между vault и внешним аккаунтом.
"""

from collections import defaultdict

from navvault.core.errors import TransferFailure
from navvault.core.math.numerical_safeguards import validate_account, validate_positive_amount


class AssetLedger:
    def __init__(self, symbol: str, decimals: int, vault_account: str = "vault"):
        validate_account(vault_account, "vault_account")
        self.symbol = symbol
        self.decimals = decimals
        self.vault_account = vault_account
        self._balances: defaultdict[str, int] = defaultdict(int)

    def credit(self, account: str, amount: int) -> None:
        """Начисление внешнему аккаунту (faucet для тестов и симуляций)."""
        validate_account(account)
        validate_positive_amount(amount, "credit amount")
        self._balances[account] += amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        validate_account(sender, "sender")
        validate_account(recipient, "recipient")
        validate_positive_amount(amount, "transfer amount")
        balance = self._balances.get(sender, 0)
        if amount > balance:
            raise TransferFailure(
                f"{self.symbol} transfer of {amount} from {sender!r} failed: balance {balance}"
            )
        self._balances[sender] = balance - amount
        self._balances[recipient] += amount

    def transfer_in(self, sender: str, amount: int) -> None:
        self._move(sender, self.vault_account, amount)

    def transfer_out(self, recipient: str, amount: int) -> None:
        self._move(self.vault_account, recipient, amount)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)
