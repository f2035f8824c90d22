from fastapi import Query

from visitor_dashboard.visitors.query import VisitorFilterParams


def get_visitor_filters(
    type: str | None = Query(None, description="Visitor type, partial case-insensitive match"),
    host: str | None = Query(None, description="Host, partial case-insensitive match"),
    search: str | None = Query(None, description="Matches name, email, host, CNIC, phone or purpose"),
    start_date: str | None = Query(None, alias="startDate", description="YYYY-MM-DD, inclusive"),
    end_date: str | None = Query(None, alias="endDate", description="YYYY-MM-DD, inclusive"),
) -> VisitorFilterParams:
    """Dependency: raw filter query parameters -> ``VisitorFilterParams``.

    Parameters are taken as plain strings so a malformed date is dropped
    rather than rejected with a 422.
    """
    return VisitorFilterParams.from_query(
        type=type,
        host=host,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )
