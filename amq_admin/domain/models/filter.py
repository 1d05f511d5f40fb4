"""Name and traffic-counter filters for topic queries.

Threshold expressions have the form ``[comparator]<integer>`` where the
comparator is one of ``<``, ``>``, ``<=``, ``>=``, ``=`` or omitted (exact
match), e.g. ``>100`` or ``0``.
"""
from __future__ import annotations

import operator
import re
from typing import Callable, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from amq_admin.core.exceptions import FilterSyntaxError

Comparator = Literal["<", ">", "<=", ">=", "="]

_EXPRESSION = re.compile(r"^\s*(<=|>=|<|>|=)?\s*([0-9]+)\s*$")

_OPERATORS: Dict[str, Callable[[int, int], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
    "=": operator.eq,
}


class Threshold(BaseModel):
    """Parsed ``[comparator]<integer>`` expression."""

    model_config = ConfigDict(frozen=True)

    comparator: Comparator = "="
    bound: int = Field(..., ge=0)

    def matches(self, actual: int) -> bool:
        return _OPERATORS[self.comparator](actual, self.bound)


def parse_filter_parameter(raw: Optional[str], field_name: str) -> Optional[Threshold]:
    """Parse *raw* into a :class:`Threshold`.

    Returns ``None`` when no filter was requested.

    Raises
    ------
    FilterSyntaxError
        If *raw* is not of the form ``[comparator]<integer>``.
    """
    if raw is None or not raw.strip():
        return None
    match = _EXPRESSION.match(raw)
    if match is None:
        raise FilterSyntaxError(field_name, raw)
    comparator, bound = match.groups()
    return Threshold(comparator=comparator or "=", bound=int(bound))


def apply_filter_parameter(raw: Optional[str], actual_value: int, parsed: Optional[Threshold]) -> bool:
    """True when no filter was requested or *actual_value* satisfies *parsed*."""
    if raw is None or not raw.strip() or parsed is None:
        return True
    return parsed.matches(actual_value)


class FilterCriteria(BaseModel):
    """Request-scoped filter: name substring plus two counter thresholds."""

    model_config = ConfigDict(frozen=True)

    name_filter: Optional[str] = None
    enqueued_raw: Optional[str] = None
    dequeued_raw: Optional[str] = None
    enqueued: Optional[Threshold] = None
    dequeued: Optional[Threshold] = None

    @classmethod
    def from_options(
        cls,
        name_filter: Optional[str] = None,
        enqueued: Optional[str] = None,
        dequeued: Optional[str] = None,
    ) -> "FilterCriteria":
        """Parse the threshold options; raises FilterSyntaxError on bad input."""
        return cls(
            name_filter=name_filter,
            enqueued_raw=enqueued,
            dequeued_raw=dequeued,
            enqueued=parse_filter_parameter(enqueued, "enqueued"),
            dequeued=parse_filter_parameter(dequeued, "dequeued"),
        )

    def matches_name(self, name: str) -> bool:
        if not self.name_filter:
            return True
        return self.name_filter.lower() in name.lower()

    def matches_counts(self, enqueued: int, dequeued: int) -> bool:
        return apply_filter_parameter(self.enqueued_raw, enqueued, self.enqueued) and apply_filter_parameter(
            self.dequeued_raw, dequeued, self.dequeued
        )
