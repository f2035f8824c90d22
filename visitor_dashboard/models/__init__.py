from visitor_dashboard.models.admin import AdminUser
from visitor_dashboard.models.base import Base, TimestampMixin
from visitor_dashboard.models.visitor import Visitor

__all__ = [
    "AdminUser",
    "Base",
    "TimestampMixin",
    "Visitor",
]
