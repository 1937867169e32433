"""
Модель значений времени выполнения.

Value — замкнутый вариант (nil/string/int/float/bool/array/mapping),
который проходит через выражения, фильтры и итоговый вывод.
Все преобразования (to_string, to_int, to_float, to_bool) тотальные.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# Диапазон целых, представимых движком (знаковое 32-битное)
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


class ValueKind(enum.Enum):
    """Виды значений."""
    NIL = "nil"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    MAPPING = "mapping"


@dataclass(frozen=True)
class Value:
    """
    Значение времени выполнения.

    Неизменяемо: каждое преобразование создаёт новый Value.
    Единственное исключение — словарь области данных (MAPPING),
    элементы которого заменяют stateful-теги через Context.

    Attributes:
        kind: Вид значения
        payload: None | str | int | float | bool | Tuple[Value, ...] | Dict[str, Value]
    """
    kind: ValueKind
    payload: Any = None

    # --- Конструкторы ---

    @classmethod
    def nil(cls) -> Value:
        return _NIL

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STRING, text)

    @classmethod
    def integer(cls, number: int) -> Value:
        return cls(ValueKind.INT, number)

    @classmethod
    def floating(cls, number: float) -> Value:
        return cls(ValueKind.FLOAT, number)

    @classmethod
    def boolean(cls, flag: bool) -> Value:
        return _TRUE if flag else _FALSE

    @classmethod
    def array(cls, items: List[Value]) -> Value:
        return cls(ValueKind.ARRAY, tuple(items))

    @classmethod
    def mapping(cls, entries: Optional[Dict[str, Value]] = None) -> Value:
        return cls(ValueKind.MAPPING, dict(entries or {}))

    @classmethod
    def from_native(cls, obj: Any, path: str = "") -> Value:
        """
        Преобразует значение хоста в Value.

        Args:
            obj: None, str, bool, int, float, list/tuple или dict со строковыми ключами
            path: Путь к значению для сообщений об ошибках

        Raises:
            TypeError: Неподдерживаемый тип значения или ключа
            ValueError: Целое вне диапазона движка
        """
        if obj is None:
            return _NIL
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, str):
            return cls.string(obj)
        # bool проверяется раньше int: bool — подкласс int
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            if obj < INT_MIN:
                raise ValueError(f"Numeric parameter {obj} exceeds min value {INT_MIN}")
            if obj > INT_MAX:
                raise ValueError(f"Numeric parameter {obj} exceeds max value {INT_MAX}")
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.floating(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array([
                cls.from_native(item, f"{path}[{i}]") for i, item in enumerate(obj)
            ])
        if isinstance(obj, dict):
            entries: Dict[str, Value] = {}
            for key, item in obj.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"Invalid template parameter key type: {type(key).__name__}"
                    )
                entries[key] = cls.from_native(item, f"{path}.{key}" if path else key)
            return cls.mapping(entries)
        where = f" at '{path}'" if path else ""
        raise TypeError(f"Invalid template parameter value type{where}: {type(obj).__name__}")

    def to_native(self) -> Any:
        """Обратное преобразование в значения Python."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_native() for item in self.payload]
        if self.kind is ValueKind.MAPPING:
            return {key: item.to_native() for key, item in self.payload.items()}
        return self.payload

    # --- Проверки вида ---

    @property
    def is_nil(self) -> bool:
        return self.kind is ValueKind.NIL

    @property
    def is_number(self) -> bool:
        return self.kind in (ValueKind.INT, ValueKind.FLOAT)

    # --- Преобразования ---

    def to_string(self) -> str:
        kind = self.kind
        if kind is ValueKind.NIL:
            return ""
        if kind is ValueKind.STRING:
            return self.payload
        if kind is ValueKind.INT:
            return str(self.payload)
        if kind is ValueKind.FLOAT:
            return repr(self.payload)
        if kind is ValueKind.BOOL:
            return "true" if self.payload else ""
        if kind is ValueKind.ARRAY:
            return "".join(item.to_string() for item in self.payload)
        if kind is ValueKind.MAPPING:
            return ""
        raise AssertionError(f"Unhandled value kind: {kind}")

    def to_int(self) -> int:
        kind = self.kind
        if kind is ValueKind.INT:
            return self.payload
        if kind is ValueKind.FLOAT:
            # inf и nan не имеют целого представления
            return int(self.payload) if math.isfinite(self.payload) else 0
        if kind is ValueKind.BOOL:
            return 1 if self.payload else 0
        if kind is ValueKind.STRING:
            return _parse_int(self.payload)
        if kind in (ValueKind.NIL, ValueKind.ARRAY, ValueKind.MAPPING):
            return 0
        raise AssertionError(f"Unhandled value kind: {kind}")

    def to_float(self) -> float:
        kind = self.kind
        if kind is ValueKind.FLOAT:
            return self.payload
        if kind is ValueKind.INT:
            return _int_to_float(self.payload)
        if kind is ValueKind.BOOL:
            return 1.0 if self.payload else 0.0
        if kind is ValueKind.STRING:
            try:
                return float(self.payload.strip())
            except ValueError:
                return 0.0
        if kind in (ValueKind.NIL, ValueKind.ARRAY, ValueKind.MAPPING):
            return 0.0
        raise AssertionError(f"Unhandled value kind: {kind}")

    def to_bool(self) -> bool:
        if self.kind is ValueKind.NIL:
            return False
        if self.kind is ValueKind.BOOL:
            return self.payload
        return True

    # --- Доступ по ключу ---

    def lookup(self, key: Value) -> Optional[Value]:
        """
        Возвращает элемент по ключу или None, если его нет.

        Массивы индексируются целыми (отрицательные — с конца),
        словари — строками. Псевдо-свойства size/first/last работают,
        только если реального ключа с таким именем нет.
        """
        kind = self.kind
        if kind is ValueKind.MAPPING:
            if key.kind is ValueKind.STRING:
                found = self.payload.get(key.payload)
                if found is not None:
                    return found
                if key.payload == "size":
                    return Value.integer(len(self.payload))
            return None

        if kind is ValueKind.ARRAY:
            items: Tuple[Value, ...] = self.payload
            if key.kind is ValueKind.INT:
                index = key.payload
                if -len(items) <= index < len(items):
                    return items[index]
                return None
            if key.kind is ValueKind.STRING:
                if key.payload == "size":
                    return Value.integer(len(items))
                if key.payload == "first":
                    return items[0] if items else _NIL
                if key.payload == "last":
                    return items[-1] if items else _NIL
            return None

        if kind is ValueKind.STRING and key.kind is ValueKind.STRING and key.payload == "size":
            return Value.integer(len(self.payload))
        return None

    def __repr__(self) -> str:
        return f"Value({self.kind.name}, {self.payload!r})"


def _parse_int(text: str) -> int:
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return int(float(stripped))
    except (ValueError, OverflowError):
        return 0


def _int_to_float(number: int) -> float:
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


_NIL = Value(ValueKind.NIL)
_TRUE = Value(ValueKind.BOOL, True)
_FALSE = Value(ValueKind.BOOL, False)


__all__ = ["Value", "ValueKind", "INT_MIN", "INT_MAX"]
