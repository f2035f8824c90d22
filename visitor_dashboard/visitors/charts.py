"""Daily visitor counts for the dashboard trend chart."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, tzinfo
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from visitor_dashboard.core.config import settings
from visitor_dashboard.models.visitor import Visitor
from visitor_dashboard.visitors.fields import as_utc, effective_timestamp_expr
from visitor_dashboard.visitors.periods import trailing_window_start
from visitor_dashboard.visitors.query import coerce_positive_int

logger = logging.getLogger(__name__)

# About a century, keeps the window start a representable date
MAX_CHART_DAYS = 36_600


async def daily_visitor_counts(
    db: AsyncSession,
    days: int | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[dict[str, Any]]:
    """Visitors per calendar day since local midnight ``days`` days ago.

    Days are calendar dates in the configured timezone, keyed ``YYYY-MM-DD``
    and sorted ascending. Days without visitors are omitted, so the series may
    have gaps. A visitor is bucketed by its effective timestamp, and only that
    timestamp is matched against the window start. ``days`` below 1 or
    unparseable falls back to ``CHART_DEFAULT_DAYS``.
    """
    days = coerce_positive_int(days, settings.CHART_DEFAULT_DAYS, maximum=MAX_CHART_DAYS)
    tz = tz or settings.tz
    start = trailing_window_start(days, now, tz)

    effective = effective_timestamp_expr(Visitor)
    result = await db.execute(select(effective).where(effective >= start))

    counts = Counter(
        as_utc(ts).astimezone(tz).date().isoformat() for ts in result.scalars().all() if ts is not None
    )
    logger.debug("Chart series over %d days from %s: %d buckets", days, start.isoformat(), len(counts))
    return [{"_id": day, "count": counts[day]} for day in sorted(counts)]
