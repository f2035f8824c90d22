"""Translate dashboard request parameters into a visitor filter.

The resulting predicate is::

    type AND host AND (entry_time in range OR timestamp in range)
                  AND (any search column contains term)

Groups whose parameter is absent are left out; with no parameters at all the
filter matches every visitor. The date group and the search group are each
an OR over several columns and are always ANDed together, never merged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any

from visitor_dashboard.visitors.fields import SEARCH_FIELDS, TIMESTAMP_FIELDS
from visitor_dashboard.visitors.periods import day_end, day_start
from visitor_dashboard.visitors.predicates import Contains, InRange, Predicate, all_of, any_of

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_positive_int(value: Any, default: int, maximum: int | None = None) -> int:
    """Parse a query-string integer, falling back to ``default``.

    Leading digits are honoured ("3abc" -> 3). Anything unparseable, zero or
    negative yields ``default`` instead of an error. Values above ``maximum``
    are clamped to it.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    else:
        match = _LEADING_INT.match(str(value))
        if match is None:
            return default
        try:
            parsed = int(match.group(1))
        except ValueError:
            # More digits than int() accepts from a string
            return default if maximum is None else maximum
    if parsed < 1:
        return default
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


def parse_day(value: str | date | None) -> date | None:
    """Parse ``YYYY-MM-DD`` (a full ISO timestamp is accepted and truncated)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        logger.debug("Ignoring unparseable date parameter %r", value)
        return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class VisitorFilterParams:
    type: str | None = None
    host: str | None = None
    search: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def from_query(
        cls,
        type: str | None = None,
        host: str | None = None,
        search: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> VisitorFilterParams:
        """Build from raw query-string values; blanks and bad dates are dropped."""
        return cls(
            type=_clean(type),
            host=_clean(host),
            search=_clean(search),
            start_date=parse_day(start_date),
            end_date=parse_day(end_date),
        )

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def recorded_between(
    lower: datetime | None,
    upper: datetime | None,
    upper_inclusive: bool = True,
) -> Predicate:
    """Either timestamp column falls inside the bounds."""
    return any_of(*(InRange(field, lower, upper, upper_inclusive) for field in TIMESTAMP_FIELDS))


def search_predicate(term: str) -> Predicate:
    return any_of(*(Contains(field, term) for field in SEARCH_FIELDS))


def build_visitor_filter(params: VisitorFilterParams, tz: tzinfo | None = None) -> Predicate:
    """Build the store filter for a listing/export request."""
    groups: list[Predicate] = []

    if params.type:
        groups.append(Contains("type", params.type))
    if params.host:
        groups.append(Contains("host", params.host))

    if params.has_date_range:
        lower = day_start(params.start_date, tz) if params.start_date else None
        upper = day_end(params.end_date, tz) if params.end_date else None
        groups.append(recorded_between(lower, upper))

    if params.search:
        groups.append(search_predicate(params.search))

    predicate = all_of(*groups)
    logger.debug("Visitor filter for %s: %r", params, predicate)
    return predicate
