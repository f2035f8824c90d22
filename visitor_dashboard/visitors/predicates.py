"""Composable filter predicates over visitor columns.

A filter is a small immutable tree: ``Contains`` and ``InRange`` leaves
combined with ``AllOf`` / ``AnyOf`` nodes. The tree compiles to a SQLAlchemy
clause for the store (``to_clause``) and can be evaluated directly against a
row or mapping (``matches``), which keeps the filter semantics testable
without a database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement

from visitor_dashboard.visitors.fields import as_utc, get_field


class Predicate(ABC):
    @abstractmethod
    def to_clause(self, model: Any) -> ColumnElement[bool]:
        """Compile to a boolean SQL expression over ``model``'s columns."""

    @abstractmethod
    def matches(self, record: Any) -> bool:
        """Evaluate against a single row or mapping."""

    def __and__(self, other: Predicate) -> Predicate:
        return all_of(self, other)

    def __or__(self, other: Predicate) -> Predicate:
        return any_of(self, other)


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match. The term is literal, not a pattern."""

    field: str
    term: str

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        return getattr(model, self.field).icontains(self.term, autoescape=True)

    def matches(self, record: Any) -> bool:
        value = get_field(record, self.field)
        if value is None:
            return False
        return self.term.lower() in str(value).lower()


@dataclass(frozen=True)
class InRange(Predicate):
    """Timestamp bound on one column. ``lower`` is always inclusive."""

    field: str
    lower: datetime | None = None
    upper: datetime | None = None
    upper_inclusive: bool = True

    def __post_init__(self) -> None:
        if self.lower is None and self.upper is None:
            raise ValueError("InRange needs at least one bound")

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        column = getattr(model, self.field)
        conditions = []
        if self.lower is not None:
            conditions.append(column >= self.lower)
        if self.upper is not None:
            conditions.append(column <= self.upper if self.upper_inclusive else column < self.upper)
        return and_(*conditions)

    def matches(self, record: Any) -> bool:
        value = as_utc(get_field(record, self.field))
        if value is None:
            return False
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None:
            if self.upper_inclusive:
                return value <= self.upper
            return value < self.upper
        return True


@dataclass(frozen=True)
class AllOf(Predicate):
    """Conjunction. An empty ``AllOf`` matches everything."""

    children: tuple[Predicate, ...] = ()

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        if not self.children:
            return true()
        return and_(*(child.to_clause(model) for child in self.children))

    def matches(self, record: Any) -> bool:
        return all(child.matches(record) for child in self.children)


@dataclass(frozen=True)
class AnyOf(Predicate):
    """Disjunction. An empty ``AnyOf`` matches nothing."""

    children: tuple[Predicate, ...] = ()

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        if not self.children:
            return false()
        return or_(*(child.to_clause(model) for child in self.children))

    def matches(self, record: Any) -> bool:
        return any(child.matches(record) for child in self.children)


MATCH_ALL = AllOf()


def all_of(*predicates: Predicate) -> Predicate:
    """AND the given predicates, collapsing the trivial cases."""
    if len(predicates) == 1:
        return predicates[0]
    return AllOf(tuple(predicates))


def any_of(*predicates: Predicate) -> Predicate:
    """OR the given predicates, collapsing the single-child case."""
    if len(predicates) == 1:
        return predicates[0]
    return AnyOf(tuple(predicates))
