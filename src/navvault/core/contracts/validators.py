"""
JSON Schema Contract Validators

Экспортируемые снапшоты vault (NAV history, позиции, статистика) проверяются
по JSON Schema контрактам (Draft 2020-12) перед выдачей наружу: pydantic
модель гарантирует внутреннюю согласованность, контракт фиксирует формат
для внешних потребителей.

Схемы:
- nav_snapshot.json (запись NAV history)
- user_position.json (позиция пользователя)
- vault_stats.json (статистика vault)
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel

NAV_SNAPSHOT = "nav_snapshot"
USER_POSITION = "user_position"
VAULT_STATS = "vault_stats"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик схем из каталога schema/ рядом с модулем (с кэшем)."""

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени без расширения, после meta-validation.

        Raises:
            FileNotFoundError: Файла схемы нет
            ValueError: Файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class ContractValidator:
    """Проверка dict против одного контракта."""

    def __init__(self, schema_name: str, loader: SchemaLoader = _SCHEMA_LOADER):
        self.schema_name = schema_name
        self._validator = Draft202012Validator(loader.load_schema(schema_name))

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Данные не соответствуют контракту
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self._validator.iter_errors(data)

    def export(self, model: BaseModel) -> Dict[str, Any]:
        """model_dump() модели, проверенный по контракту."""
        data = model.model_dump(mode="json")
        self.validate(data)
        return data


@lru_cache(maxsize=None)
def contract(schema_name: str) -> ContractValidator:
    """Валидатор контракта (один экземпляр на схему)."""
    return ContractValidator(schema_name)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_nav_snapshot(data: Dict[str, Any]) -> None:
    contract(NAV_SNAPSHOT).validate(data)


def validate_user_position(data: Dict[str, Any]) -> None:
    contract(USER_POSITION).validate(data)


def validate_vault_stats(data: Dict[str, Any]) -> None:
    contract(VAULT_STATS).validate(data)
