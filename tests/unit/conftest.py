"""
Общие fixtures для unit-тестов vault.

Базовая конфигурация:
- ManualClock (детерминированное время)
- InMemoryPriceOracle с ценой volatile актива $3.00 (mantissa 300_000_000, expo -8)
- stable ledger (6 знаков), volatile ledger (18 знаков), share ledger
- роли: "admin" → ADMIN_ROLE, "agent" → AGENT_ROLE
- аккаунты alice, bob, agent с балансами обоих активов
"""

import pytest

from navvault.config import VaultConfig
from navvault.core.clock import ManualClock
from navvault.core.domain.units import AssetKind
from navvault.ledger import ADMIN_ROLE, AGENT_ROLE, AssetLedger, RoleRegistry, ShareLedger
from navvault.oracle import InMemoryPriceOracle
from navvault.vault import Vault

USD = 10**6
ETH = 10**18

# $3.00 в формате оракула
ORACLE_PRICE = 300_000_000
ORACLE_EXPO = -8
VAULT_PRICE = 3 * USD


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def oracle(clock: ManualClock) -> InMemoryPriceOracle:
    feed = InMemoryPriceOracle(clock=clock, fee_per_update=1)
    feed.publish(ORACLE_PRICE, ORACLE_EXPO)
    return feed


@pytest.fixture
def share_ledger() -> ShareLedger:
    return ShareLedger("Agent of Profits Vault", "AOP")


@pytest.fixture
def stable_ledger() -> AssetLedger:
    ledger = AssetLedger("USDC", 6)
    for account in ("alice", "bob", "agent"):
        ledger.credit(account, 10_000 * USD)
    return ledger


@pytest.fixture
def volatile_ledger() -> AssetLedger:
    ledger = AssetLedger("WETH", 18)
    for account in ("alice", "bob", "agent"):
        ledger.credit(account, 10 * ETH)
    return ledger


@pytest.fixture
def roles() -> RoleRegistry:
    registry = RoleRegistry()
    registry.grant_role(ADMIN_ROLE, "admin")
    registry.grant_role(AGENT_ROLE, "agent")
    return registry


@pytest.fixture
def vault_config() -> VaultConfig:
    return VaultConfig()


@pytest.fixture
def vault(
    oracle: InMemoryPriceOracle,
    share_ledger: ShareLedger,
    stable_ledger: AssetLedger,
    volatile_ledger: AssetLedger,
    roles: RoleRegistry,
    vault_config: VaultConfig,
    clock: ManualClock,
) -> Vault:
    return Vault(
        oracle=oracle,
        share_ledger=share_ledger,
        asset_ledgers={AssetKind.STABLE: stable_ledger, AssetKind.VOLATILE: volatile_ledger},
        access_control=roles,
        config=vault_config,
        clock=clock,
    )
