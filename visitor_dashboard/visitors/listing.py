"""Visitor listing, export and filter-option lookups.

Ordering is most recent effective timestamp first, visitors without any
timestamp last, ties broken by id descending. The sort key is a COALESCE
evaluated by the store, so pagination is an OFFSET/LIMIT on the store side and
only the requested page is loaded.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from visitor_dashboard.core.config import settings
from visitor_dashboard.models.visitor import Visitor
from visitor_dashboard.visitors.fields import (
    as_utc,
    effective_timestamp,
    effective_timestamp_expr,
    resolve_email,
    resolve_identity_number,
    resolve_name,
    resolve_phone,
)
from visitor_dashboard.visitors.predicates import MATCH_ALL, Predicate
from visitor_dashboard.visitors.query import coerce_positive_int

logger = logging.getLogger(__name__)

# OFFSET and LIMIT are bound as signed 64-bit integers
MAX_SQL_INT = 2**63 - 1

RECENCY_ORDER = (
    effective_timestamp_expr(Visitor).desc().nulls_last(),
    Visitor.id.desc(),
)


def to_display(visitor: Visitor) -> dict[str, Any]:
    """Project a row into the shape the dashboard table renders."""
    return {
        "_id": visitor.id,
        "Type": visitor.type,
        "Name": resolve_name(visitor),
        "CNIC": resolve_identity_number(visitor),
        "Email": resolve_email(visitor),
        "Phone": resolve_phone(visitor),
        "Host": visitor.host,
        "Purpose": visitor.purpose,
        "EntryTime": effective_timestamp(visitor),
        "ExitTime": as_utc(visitor.exit_time),
        "IsGroupVisit": bool(visitor.is_group_visit),
        "GroupId": visitor.group_id,
        "TotalMembers": visitor.total_members,
        "GroupMembers": list(visitor.group_members or []),
    }


def paginate(total: int, page: int, page_size: int) -> dict[str, Any]:
    return {
        "current": page,
        "pages": math.ceil(total / page_size),
        "total": total,
        "hasNext": page * page_size < total,
        "hasPrev": page > 1,
    }


async def count_visitors(db: AsyncSession, predicate: Predicate = MATCH_ALL) -> int:
    result = await db.execute(select(func.count()).select_from(Visitor).where(predicate.to_clause(Visitor)))
    return result.scalar() or 0


async def list_visitors(
    db: AsyncSession,
    predicate: Predicate = MATCH_ALL,
    page: Any = 1,
    page_size: Any = None,
) -> dict[str, Any]:
    """One page of matching visitors plus pagination metadata.

    ``page`` below 1 or unparseable becomes 1, and a bad ``page_size`` becomes
    ``DEFAULT_PAGE_SIZE``. A page past the end is an empty page, not an error.
    """
    page = coerce_positive_int(page, 1)
    page_size = coerce_positive_int(page_size, settings.DEFAULT_PAGE_SIZE, maximum=MAX_SQL_INT)
    skip = (page - 1) * page_size
    total = await count_visitors(db, predicate)

    visitors = []
    if skip < total:
        result = await db.execute(
            select(Visitor)
            .where(predicate.to_clause(Visitor))
            .order_by(*RECENCY_ORDER)
            .offset(skip)
            .limit(page_size)
        )
        visitors = result.scalars().all()
    logger.debug("Listed %d of %d visitors (page %d, size %d)", len(visitors), total, page, page_size)

    return {
        "visitors": [to_display(v) for v in visitors],
        "pagination": paginate(total, page, page_size),
    }


async def export_visitors(db: AsyncSession, predicate: Predicate = MATCH_ALL) -> dict[str, Any]:
    """Every matching visitor in listing order, unpaginated."""
    result = await db.execute(select(Visitor).where(predicate.to_clause(Visitor)).order_by(*RECENCY_ORDER))
    visitors = [to_display(v) for v in result.scalars().all()]
    return {"visitors": visitors, "total": len(visitors)}


async def _distinct_values(db: AsyncSession, column) -> list[str]:
    result = await db.execute(select(distinct(column)))
    return sorted(value for value in result.scalars().all() if value and value.strip())


async def distinct_hosts(db: AsyncSession) -> list[str]:
    return await _distinct_values(db, Visitor.host)


async def distinct_types(db: AsyncSession) -> list[str]:
    return await _distinct_values(db, Visitor.type)
