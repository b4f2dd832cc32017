"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов и constraints
- Запрет лишних полей (additionalProperties: false)
- Интеграция с Pydantic моделями
"""

from pathlib import Path

import pytest
from jsonschema import ValidationError

from navvault.core.contracts import (
    NAV_SNAPSHOT,
    USER_POSITION,
    VAULT_STATS,
    ContractValidator,
    SchemaLoader,
    contract,
    validate_nav_snapshot,
    validate_user_position,
    validate_vault_stats,
)
from navvault.core.domain import AssetKind, NavSnapshot, UserPosition

# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_nav_snapshot():
    """Валидный nav_snapshot."""
    return {
        "timestamp": 1700000000,
        "nav_per_share": 1080000000000000000,
        "total_value": 1080000,
    }


@pytest.fixture
def valid_user_position():
    """Валидный user_position."""
    return {
        "account": "alice",
        "shares": 1000000000000000000,
        "stable_contributed": 1000000,
        "volatile_contributed": 0,
        "first_deposit_time": 1700000000,
        "last_deposit_time": 1700000100,
        "active": True,
    }


@pytest.fixture
def valid_vault_stats():
    """Валидный vault_stats."""
    return {
        "name": "Agent of Profits Vault",
        "symbol": "AOP",
        "total_value": 1080000,
        "nav_per_share": 1080000000000000000,
        "total_shares": 1000000000000000000,
        "stable_balance": 1080000,
        "volatile_balance": 0,
        "deployed_stable": 0,
        "deployed_volatile": 0,
        "total_users": 1,
        "active_users": 1,
        "total_deposited_value": 1000000,
        "total_withdrawn_value": 0,
        "total_profit_value": 100000,
        "total_fees_value": 20000,
        "last_nav_update_time": 1700000000,
        "price_is_fallback": False,
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем"""

    @pytest.mark.parametrize("schema_name", ["nav_snapshot", "user_position", "vault_stats"])
    def test_all_schemas_load(self, schema_name: str) -> None:
        """Все схемы загружаются и проходят meta-validation"""
        schema = SchemaLoader().load_schema(schema_name)

        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
        assert schema["additionalProperties"] is False

    def test_schema_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("nav_snapshot") is loader.load_schema("nav_snapshot")

    def test_unknown_schema_raises(self) -> None:
        with pytest.raises(FileNotFoundError, match="Schema not found"):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="Schema directory not found"):
            SchemaLoader(tmp_path / "missing")

    def test_invalid_schema_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "broken.json").write_text('{"type": 42}', encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON Schema in broken.json"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# NAV SNAPSHOT
# =============================================================================


class TestNavSnapshotContract:
    def test_valid_passes(self, valid_nav_snapshot) -> None:
        validate_nav_snapshot(valid_nav_snapshot)

    def test_missing_required_field(self, valid_nav_snapshot) -> None:
        del valid_nav_snapshot["total_value"]

        with pytest.raises(ValidationError, match="'total_value' is a required property"):
            validate_nav_snapshot(valid_nav_snapshot)

    def test_float_rejected(self, valid_nav_snapshot) -> None:
        """Денежные поля — только integer"""
        valid_nav_snapshot["nav_per_share"] = 1.08

        assert not contract(NAV_SNAPSHOT).is_valid(valid_nav_snapshot)

    def test_additional_property_rejected(self, valid_nav_snapshot) -> None:
        valid_nav_snapshot["price"] = 3000000

        with pytest.raises(ValidationError, match="Additional properties"):
            validate_nav_snapshot(valid_nav_snapshot)

    def test_pydantic_model_conforms(self) -> None:
        snapshot = NavSnapshot(timestamp=1, nav_per_share=10**18, total_value=5)
        validate_nav_snapshot(snapshot.model_dump())


# =============================================================================
# USER POSITION
# =============================================================================


class TestUserPositionContract:
    def test_valid_passes(self, valid_user_position) -> None:
        validate_user_position(valid_user_position)

    def test_negative_shares_rejected(self, valid_user_position) -> None:
        valid_user_position["shares"] = -1

        with pytest.raises(ValidationError, match="less than the minimum"):
            validate_user_position(valid_user_position)

    def test_empty_account_rejected(self, valid_user_position) -> None:
        valid_user_position["account"] = ""
        assert not contract(USER_POSITION).is_valid(valid_user_position)

    def test_collects_all_errors(self, valid_user_position) -> None:
        valid_user_position["active"] = "yes"
        valid_user_position["stable_contributed"] = -5

        errors = list(contract(USER_POSITION).iter_errors(valid_user_position))
        assert len(errors) == 2

    def test_pydantic_model_conforms(self) -> None:
        position = UserPosition.opened("bob", 1_700_000_000).with_deposit(
            AssetKind.VOLATILE, 10**18, 3 * 10**18, 1_700_000_000
        )
        validate_user_position(position.model_dump())


# =============================================================================
# VAULT STATS
# =============================================================================


class TestVaultStatsContract:
    def test_valid_passes(self, valid_vault_stats) -> None:
        validate_vault_stats(valid_vault_stats)

    def test_missing_field(self, valid_vault_stats) -> None:
        del valid_vault_stats["active_users"]
        assert not contract(VAULT_STATS).is_valid(valid_vault_stats)

    def test_bool_type_enforced(self, valid_vault_stats) -> None:
        valid_vault_stats["price_is_fallback"] = 0

        with pytest.raises(ValidationError, match="is not of type 'boolean'"):
            validate_vault_stats(valid_vault_stats)


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class TestContractValidator:
    def test_instances_cached_per_schema(self) -> None:
        assert contract(NAV_SNAPSHOT) is contract(NAV_SNAPSHOT)
        assert contract(NAV_SNAPSHOT) is not contract(VAULT_STATS)

    def test_export_returns_validated_dict(self) -> None:
        snapshot = NavSnapshot(timestamp=1, nav_per_share=10**18, total_value=5)

        assert contract(NAV_SNAPSHOT).export(snapshot) == {
            "timestamp": 1,
            "nav_per_share": 10**18,
            "total_value": 5,
        }

    def test_export_rejects_model_outside_contract(self) -> None:
        """Модель с полем, которого нет в контракте, не экспортируется"""
        position = UserPosition.opened("bob", 1_700_000_000)

        with pytest.raises(ValidationError):
            contract(NAV_SNAPSHOT).export(position)

    def test_custom_loader(self, tmp_path: Path) -> None:
        (tmp_path / "flag.json").write_text(
            '{"$schema": "https://json-schema.org/draft/2020-12/schema", "type": "boolean"}',
            encoding="utf-8",
        )
        validator = ContractValidator("flag", SchemaLoader(tmp_path))

        assert validator.is_valid(True)
        assert not validator.is_valid(1)
