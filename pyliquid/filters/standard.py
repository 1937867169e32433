"""
Стандартная библиотека фильтров.

Каждый фильтр сам проверяет число аргументов и никогда не изменяет
входное значение: результат — всегда новый Value.
"""

from __future__ import annotations

import html
from typing import Dict, List
from urllib.parse import quote

from ..errors import Arity, ArgumentError
from ..values import Value, ValueKind
from .registry import FilterFunction, FilterRegistry


def _check_arity(name: str, args: List[Value], expected: Arity) -> None:
    if isinstance(expected, tuple):
        low, high = expected
        if not low <= len(args) <= high:
            raise ArgumentError(name, expected, len(args))
    elif len(args) != expected:
        raise ArgumentError(name, expected, len(args))


# --- Строковые фильтры ---

def append(input: Value, args: List[Value]) -> Value:
    text = input.to_string()
    for arg in args:
        text += arg.to_string()
    return Value.string(text)


def prepend(input: Value, args: List[Value]) -> Value:
    _check_arity("prepend", args, 1)
    return Value.string(args[0].to_string() + input.to_string())


def downcase(input: Value, args: List[Value]) -> Value:
    _check_arity("downcase", args, 0)
    return Value.string(input.to_string().lower())


def upcase(input: Value, args: List[Value]) -> Value:
    _check_arity("upcase", args, 0)
    return Value.string(input.to_string().upper())


def capitalize(input: Value, args: List[Value]) -> Value:
    _check_arity("capitalize", args, 0)
    text = input.to_string()
    return Value.string(text[:1].upper() + text[1:])


def strip(input: Value, args: List[Value]) -> Value:
    _check_arity("strip", args, 0)
    return Value.string(input.to_string().strip())


def lstrip(input: Value, args: List[Value]) -> Value:
    _check_arity("lstrip", args, 0)
    return Value.string(input.to_string().lstrip())


def rstrip(input: Value, args: List[Value]) -> Value:
    _check_arity("rstrip", args, 0)
    return Value.string(input.to_string().rstrip())


def strip_newlines(input: Value, args: List[Value]) -> Value:
    _check_arity("strip_newlines", args, 0)
    return Value.string(input.to_string().replace("\n", "").replace("\r", ""))


def newline_to_br(input: Value, args: List[Value]) -> Value:
    _check_arity("newline_to_br", args, 0)
    return Value.string(input.to_string().replace("\n", "<br />\n"))


def escape(input: Value, args: List[Value]) -> Value:
    _check_arity("escape", args, 0)
    escaped = html.escape(input.to_string(), quote=False)
    return Value.string(escaped.replace('"', "&quot;").replace("'", "&#39;"))


def url_encode(input: Value, args: List[Value]) -> Value:
    _check_arity("url_encode", args, 0)
    # Без исключений: кодируется всё, кроме unreserved (A-Z a-z 0-9 - . _ ~)
    return Value.string(quote(input.to_string(), safe=""))


def strip_html(input: Value, args: List[Value]) -> Value:
    _check_arity("strip_html", args, 0)
    output = []
    in_tag = False
    for ch in input.to_string():
        if ch == "<":
            in_tag = True
        elif ch == ">":
            in_tag = False
        elif not in_tag:
            output.append(ch)
    return Value.string("".join(output))


def truncate(input: Value, args: List[Value]) -> Value:
    _check_arity("truncate", args, (1, 2))
    length = args[0].to_int()
    suffix = args[1].to_string() if len(args) == 2 else "..."
    keep = max(0, length - len(suffix))
    return Value.string(input.to_string()[:keep] + suffix)


def replace(input: Value, args: List[Value]) -> Value:
    _check_arity("replace", args, 2)
    return Value.string(input.to_string().replace(args[0].to_string(), args[1].to_string()))


def remove(input: Value, args: List[Value]) -> Value:
    _check_arity("remove", args, 1)
    return Value.string(input.to_string().replace(args[0].to_string(), ""))


def split(input: Value, args: List[Value]) -> Value:
    _check_arity("split", args, 1)
    text = input.to_string()
    separator = args[0].to_string()
    parts = list(text) if separator == "" else text.split(separator)
    return Value.array([Value.string(part) for part in parts])


# --- Фильтры общего назначения ---

def default(input: Value, args: List[Value]) -> Value:
    _check_arity("default", args, 1)
    if not input.to_bool() or (input.kind is ValueKind.STRING and input.payload == ""):
        return args[0]
    return input


def size(input: Value, args: List[Value]) -> Value:
    _check_arity("size", args, 0)
    if input.kind in (ValueKind.STRING, ValueKind.ARRAY, ValueKind.MAPPING):
        return Value.integer(len(input.payload))
    return Value.integer(0)


def join(input: Value, args: List[Value]) -> Value:
    _check_arity("join", args, (0, 1))
    separator = args[0].to_string() if args else " "
    if input.kind is ValueKind.ARRAY:
        return Value.string(separator.join(item.to_string() for item in input.payload))
    return Value.string(input.to_string())


def first(input: Value, args: List[Value]) -> Value:
    _check_arity("first", args, 0)
    if input.kind is ValueKind.ARRAY and input.payload:
        return input.payload[0]
    return Value.nil()


def last(input: Value, args: List[Value]) -> Value:
    _check_arity("last", args, 0)
    if input.kind is ValueKind.ARRAY and input.payload:
        return input.payload[-1]
    return Value.nil()


STANDARD_FILTERS: Dict[str, FilterFunction] = {
    "append": append,
    "prepend": prepend,
    "downcase": downcase,
    "upcase": upcase,
    "capitalize": capitalize,
    "strip": strip,
    "rstrip": rstrip,
    "lstrip": lstrip,
    "strip_newlines": strip_newlines,
    "newline_to_br": newline_to_br,
    "escape": escape,
    "url_encode": url_encode,
    "strip_html": strip_html,
    "truncate": truncate,
    "replace": replace,
    "remove": remove,
    "split": split,
    "default": default,
    "size": size,
    "join": join,
    "first": first,
    "last": last,
}


def register_standard_filters(registry: FilterRegistry) -> None:
    """Регистрирует стандартные фильтры в реестре."""
    for name, func in STANDARD_FILTERS.items():
        registry.register(name, func)


__all__ = ["STANDARD_FILTERS", "register_standard_filters"]
