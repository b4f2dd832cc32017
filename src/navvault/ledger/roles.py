"""RoleRegistry — хранение ролей в памяти процесса."""

from collections import defaultdict

from navvault.core.math.numerical_safeguards import validate_account


class RoleRegistry:
    def __init__(self) -> None:
        self._members: defaultdict[str, set[str]] = defaultdict(set)

    def grant_role(self, role: str, account: str) -> None:
        validate_account(account)
        self._members[role].add(account)

    def revoke_role(self, role: str, account: str) -> None:
        self._members[role].discard(account)

    def has_role(self, role: str, account: str) -> bool:
        return account in self._members.get(role, ())
