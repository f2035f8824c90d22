from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from visitor_dashboard.core.security import generate_record_id
from visitor_dashboard.models.base import Base, TimestampMixin


class Visitor(TimestampMixin, Base):
    """One logged visit.

    Rows come from more than one ingestion client over time, so name, CNIC,
    phone and the visit time each exist under two column names. Read them
    through ``visitor_dashboard.visitors.fields`` rather than directly.
    """

    __tablename__ = "visitors"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_record_id)
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    visitor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cnic: Mapped[str | None] = mapped_column(String(50), nullable=True)
    visitor_cnic: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    visitor_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    host: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    purpose: Mapped[str] = mapped_column(String(1000), nullable=False)

    entry_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    timestamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    is_group_visit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    group_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    total_members: Mapped[int | None] = mapped_column(Integer, nullable=True)
    group_members: Mapped[list | None] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
