"""
Фильтры: реестр и стандартная библиотека.
"""

from __future__ import annotations

from .registry import FilterRegistry, FilterFunction
from .standard import STANDARD_FILTERS, register_standard_filters

__all__ = [
    "FilterRegistry",
    "FilterFunction",
    "STANDARD_FILTERS",
    "register_standard_filters",
]
