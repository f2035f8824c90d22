"""Visitors router: the dashboard's read API over the visitor log.

Listing, export, KPI statistics, the trend chart series and the filter
dropdown options. Every route requires an admin bearer token.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from visitor_dashboard.core.config import settings
from visitor_dashboard.core.database import get_db, get_session_factory
from visitor_dashboard.core.dependencies import get_visitor_filters
from visitor_dashboard.core.exceptions import VisitorQueryError
from visitor_dashboard.core.security import get_current_admin
from visitor_dashboard.visitors import (
    VisitorFilterParams,
    build_visitor_filter,
    coerce_positive_int,
    compute_statistics,
    daily_visitor_counts,
    distinct_hosts,
    distinct_types,
    export_visitors,
    list_visitors,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visitors", tags=["visitors"], dependencies=[Depends(get_current_admin)])


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class VisitorDisplay(BaseModel):
    id: str = Field(alias="_id")
    type: str = Field(alias="Type")
    name: str = Field(alias="Name")
    cnic: str = Field(alias="CNIC")
    email: str = Field(alias="Email")
    phone: str = Field(alias="Phone")
    host: str = Field(alias="Host")
    purpose: str = Field(alias="Purpose")
    entry_time: datetime | None = Field(None, alias="EntryTime")
    exit_time: datetime | None = Field(None, alias="ExitTime")
    is_group_visit: bool = Field(False, alias="IsGroupVisit")
    group_id: str | None = Field(None, alias="GroupId")
    total_members: int | None = Field(None, alias="TotalMembers")
    group_members: list[str] = Field(default_factory=list, alias="GroupMembers")

    model_config = {"populate_by_name": True}


class Pagination(BaseModel):
    current: int
    pages: int
    total: int
    hasNext: bool
    hasPrev: bool


class VisitorListResponse(BaseModel):
    visitors: list[VisitorDisplay]
    pagination: Pagination


class VisitorExportResponse(BaseModel):
    visitors: list[VisitorDisplay]
    total: int


class GroupCount(BaseModel):
    id: str = Field(alias="_id")
    count: int

    model_config = {"populate_by_name": True}


class VisitorStats(BaseModel):
    totalVisitors: int
    todayVisitors: int
    weeklyVisitors: int
    monthlyVisitors: int
    typeStats: list[GroupCount]
    topHosts: list[GroupCount]


class DailyCount(BaseModel):
    date: str = Field(alias="_id")
    count: int

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=VisitorListResponse)
async def get_visitors(
    page: str | None = Query(None, description="Page number, starting at 1"),
    limit: str | None = Query(None, description="Page size"),
    filters: VisitorFilterParams = Depends(get_visitor_filters),
    db: AsyncSession = Depends(get_db),
) -> VisitorListResponse:
    """Filtered visitors, most recent first, one page at a time."""
    page_number = coerce_positive_int(page, 1)
    page_size = coerce_positive_int(limit, settings.VISITORS_PAGE_SIZE)
    try:
        return await list_visitors(db, build_visitor_filter(filters), page_number, page_size)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching visitors")
        raise VisitorQueryError("Failed to fetch visitors", str(exc)) from exc


@router.get("/stats", response_model=VisitorStats)
async def get_visitor_stats(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> VisitorStats:
    """KPI counters (total, today, this week, this month) and type/host breakdowns."""
    try:
        return await compute_statistics(session_factory)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching stats")
        raise VisitorQueryError("Failed to fetch statistics", str(exc)) from exc


@router.get("/chart-data", response_model=list[DailyCount])
async def get_chart_data(
    days: str | None = Query(None, description="Trailing window in days"),
    db: AsyncSession = Depends(get_db),
) -> list[DailyCount]:
    """Visitors per day over the trailing window, ascending by date."""
    window = coerce_positive_int(days, settings.CHART_DEFAULT_DAYS)
    try:
        return await daily_visitor_counts(db, window)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching chart data")
        raise VisitorQueryError("Failed to fetch chart data", str(exc)) from exc


@router.get("/export", response_model=VisitorExportResponse)
async def export_visitor_log(
    filters: VisitorFilterParams = Depends(get_visitor_filters),
    db: AsyncSession = Depends(get_db),
) -> VisitorExportResponse:
    """Every visitor matching the filters, in listing order, unpaginated."""
    try:
        return await export_visitors(db, build_visitor_filter(filters))
    except SQLAlchemyError as exc:
        logger.exception("Error exporting visitors")
        raise VisitorQueryError("Failed to export visitors", str(exc)) from exc


@router.get("/unique-hosts", response_model=list[str])
async def get_unique_hosts(db: AsyncSession = Depends(get_db)) -> list[str]:
    try:
        return await distinct_hosts(db)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching unique hosts")
        raise VisitorQueryError("Failed to fetch hosts", str(exc)) from exc


@router.get("/unique-types", response_model=list[str])
async def get_unique_types(db: AsyncSession = Depends(get_db)) -> list[str]:
    try:
        return await distinct_types(db)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching unique types")
        raise VisitorQueryError("Failed to fetch types", str(exc)) from exc
