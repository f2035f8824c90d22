"""Visitor query and aggregation layer.

Public API:
- VisitorFilterParams / build_visitor_filter: request parameters -> predicate
- Contains, InRange, AllOf, AnyOf, MATCH_ALL: the predicate algebra
- list_visitors, export_visitors: sorted (and paginated) visitor reads
- distinct_hosts, distinct_types: filter dropdown options
- compute_statistics: KPI counters and group-by summaries
- daily_visitor_counts: trend chart series
"""

from visitor_dashboard.visitors.charts import daily_visitor_counts
from visitor_dashboard.visitors.listing import (
    distinct_hosts,
    distinct_types,
    export_visitors,
    list_visitors,
)
from visitor_dashboard.visitors.predicates import MATCH_ALL, AllOf, AnyOf, Contains, InRange, Predicate
from visitor_dashboard.visitors.query import VisitorFilterParams, build_visitor_filter, coerce_positive_int
from visitor_dashboard.visitors.statistics import compute_statistics

__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "InRange",
    "MATCH_ALL",
    "Predicate",
    "VisitorFilterParams",
    "build_visitor_filter",
    "coerce_positive_int",
    "compute_statistics",
    "daily_visitor_counts",
    "distinct_hosts",
    "distinct_types",
    "export_visitors",
    "list_visitors",
]
