"""
Контракт сериализованной формы PositiveDecimal

Внешние слои (хранилища, wire-форматы) видят PositiveDecimal как голый
JSON-литерал: строку decimal или число, без обёртки и тегов. Контракт
задан JSON Schema в contracts/schema/ и поставляется вместе с пакетом.

Схемы:
- positive_decimal.json (неотрицательный decimal: строка или число)
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List

import jsonschema
from jsonschema import ValidationError
from jsonschema.exceptions import best_match
from jsonschema.validators import validator_for


# =============================================================================
# SCHEMA LOADER
# =============================================================================

SCHEMA_DIR = Path(__file__).parent / "schema"


class SchemaLoader:
    """
    Чтение схем из каталога с package data.

    Каждая схема читается один раз и проходит meta-валидацию по диалекту,
    объявленному в её "$schema".
    """

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self.schema_dir = schema_dir
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени файла без расширения.

        Raises:
            FileNotFoundError: Нет файла <schema_name>.json
            ValueError: Содержимое не является корректной JSON Schema
        """
        cached = self._cache.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            validator_for(schema).check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        self._cache[schema_name] = schema
        return schema


@lru_cache(maxsize=None)
def get_schema_loader() -> SchemaLoader:
    """Загрузчик схем пакета, общий для процесса."""
    return SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка JSON-данных против одной схемы пакета."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = get_schema_loader().load_schema(schema_name)
        self._validator = validator_for(self.schema)(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: Наиболее релевантная ошибка из найденных
        """
        error = best_match(self._validator.iter_errors(data))
        if error is not None:
            raise error

    def is_valid(self, data: Any) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self._validator.iter_errors(data)

    def error_messages(self, data: Any) -> List[str]:
        """Сообщения всех ошибок, пустой список для валидных данных."""
        return [error.message for error in self.iter_errors(data)]


class PositiveDecimalValidator(ContractValidator):
    def __init__(self):
        super().__init__("positive_decimal")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_positive_decimal(data: Any) -> None:
    """
    Проверка десериализованного JSON на соответствие контракту.

    Raises:
        ValidationError: Данные не являются неотрицательным decimal

    Examples:
        >>> validate_positive_decimal("100.50")
        >>> validate_positive_decimal(0)
    """
    PositiveDecimalValidator().validate(data)
