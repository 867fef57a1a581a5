"""Search filter parsing and predicate construction.

Filters arrive as raw query-string values. Each recognised filter becomes a
``Condition`` (column, operator, value); conditions are compiled into
SQLAlchemy clauses so every value travels as a bound parameter. Values that
can't be parsed are dropped rather than rejected.
"""

import operator
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from . import models
from .normalize import first_number, to_float, to_int

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
# OFFSET is bound as a signed 64-bit integer
MAX_OFFSET = 2 ** 63 - 1


class Comparison(str, Enum):
    GE = ">="
    LE = "<="
    GT = ">"
    LT = "<"
    EQ = "="


# Two-character operators must be tried before their one-character prefixes
_PREFIX_ORDER = (
    Comparison.GE,
    Comparison.LE,
    Comparison.GT,
    Comparison.LT,
    Comparison.EQ,
)

CONTAINS = "contains"

_COMPILERS = {
    Comparison.GE: operator.ge,
    Comparison.LE: operator.le,
    Comparison.GT: operator.gt,
    Comparison.LT: operator.lt,
    Comparison.EQ: operator.eq,
    CONTAINS: lambda column, value: column.icontains(value, autoescape=True),
}

Condition = namedtuple("Condition", ["column", "op", "value"])


@dataclass
class SearchFilters:
    title: Optional[str] = None
    cuisine: Optional[str] = None
    rating: Optional[str] = None
    total_time: Optional[str] = None
    calories: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_comparison(value: str) -> Tuple[Comparison, str]:
    """Split an optional leading operator off a filter value.

    ">=4.5" -> (GE, "4.5"); a bare "4.5" means equality.
    """
    text = value.strip()
    for comparison in _PREFIX_ORDER:
        if text.startswith(comparison.value):
            return comparison, text[len(comparison.value):].strip()
    return Comparison.EQ, text


def _positive_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def paginate(page=None, limit=None, default_limit=DEFAULT_LIMIT,
             max_limit=MAX_LIMIT) -> Pagination:
    """Resolve page/limit query values, falling back to defaults.

    The limit is clamped to max_limit whatever was requested, and the page
    so that its offset still fits the database; such a page is just empty.
    """
    page_num = _positive_int(page) or DEFAULT_PAGE
    limit_num = min(_positive_int(limit) or default_limit, max_limit)
    page_num = min(page_num, MAX_OFFSET // limit_num)
    return Pagination(page=page_num, limit=limit_num)


# (filter name, column, operand parser)
_NUMERIC_FILTERS = (
    ("rating", models.Recipe.rating, to_float),
    ("total_time", models.Recipe.total_time, to_int),
    ("calories", models.Recipe.calories, first_number),
)


def build_conditions(filters: SearchFilters) -> List[Condition]:
    conditions = []
    if filters.title:
        conditions.append(Condition(models.Recipe.title, CONTAINS, filters.title))
    if filters.cuisine:
        conditions.append(
            Condition(models.Recipe.cuisine, CONTAINS, filters.cuisine)
        )

    for name, column, parse in _NUMERIC_FILTERS:
        raw = getattr(filters, name)
        if not raw:
            continue
        comparison, operand = parse_comparison(raw)
        value = parse(operand)
        if value is None:
            continue
        conditions.append(Condition(column, comparison, value))
    return conditions


def compile_conditions(conditions: List[Condition]) -> list:
    return [_COMPILERS[c.op](c.column, c.value) for c in conditions]


def build_predicate(filters: SearchFilters) -> list:
    """Return the WHERE clauses for filters, to be combined with AND."""
    return compile_conditions(build_conditions(filters))
