"""Dashboard KPI counters and group-by summaries.

The six sub-queries are independent reads, so they run concurrently, each on
its own session (an ``AsyncSession`` cannot be shared between tasks). Any
failing sub-query fails the whole call; no partial result is returned.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, tzinfo
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from visitor_dashboard.core.config import settings
from visitor_dashboard.models.visitor import Visitor
from visitor_dashboard.visitors.listing import count_visitors
from visitor_dashboard.visitors.periods import stats_windows
from visitor_dashboard.visitors.query import recorded_between

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def group_counts(db: AsyncSession, column, limit: int | None = None) -> list[dict[str, Any]]:
    """Count visitors per distinct ``column`` value.

    Ordered by count descending, then by value ascending so equal counts come
    back in a stable order.
    """
    count = func.count().label("visitor_count")
    stmt = select(column, count).group_by(column).order_by(count.desc(), column.asc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [{"_id": value, "count": n} for value, n in result.all()]


async def compute_statistics(
    session_factory: async_sessionmaker[AsyncSession],
    now: datetime | None = None,
    tz: tzinfo | None = None,
    top_hosts_limit: int | None = None,
) -> dict[str, Any]:
    """Total/today/week/month visitor counts plus type and top-host breakdowns."""
    windows = stats_windows(now, tz)
    top_hosts_limit = top_hosts_limit or settings.TOP_HOSTS_LIMIT

    async def run(query: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with session_factory() as session:
            return await query(session)

    def in_window(name: str):
        start, end = windows[name]
        predicate = recorded_between(start, end, upper_inclusive=False)
        return lambda db: count_visitors(db, predicate)

    (
        total_visitors,
        today_visitors,
        weekly_visitors,
        monthly_visitors,
        type_stats,
        top_hosts,
    ) = await asyncio.gather(
        run(count_visitors),
        run(in_window("today")),
        run(in_window("week")),
        run(in_window("month")),
        run(lambda db: group_counts(db, Visitor.type)),
        run(lambda db: group_counts(db, Visitor.host, limit=top_hosts_limit)),
    )

    logger.debug(
        "Visitor stats: total=%d today=%d week=%d month=%d",
        total_visitors,
        today_visitors,
        weekly_visitors,
        monthly_visitors,
    )
    return {
        "totalVisitors": total_visitors,
        "todayVisitors": today_visitors,
        "weeklyVisitors": weekly_visitors,
        "monthlyVisitors": monthly_visitors,
        "typeStats": type_stats,
        "topHosts": top_hosts,
    }
