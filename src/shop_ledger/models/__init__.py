"""Data models for orders, capital entries, users and reports."""

from shop_ledger.models.capital import ALLOWED_SOURCES, CapitalEntry, CapitalSource, CapitalType
from shop_ledger.models.order import Order, OrderStatus
from shop_ledger.models.report import (
    CapitalSummary,
    DashboardOverview,
    MonthlyRevenue,
    OrderSummary,
)
from shop_ledger.models.user import User, UserRole

__all__ = [
    "Order",
    "OrderStatus",
    "CapitalEntry",
    "CapitalSource",
    "CapitalType",
    "ALLOWED_SOURCES",
    "User",
    "UserRole",
    "OrderSummary",
    "MonthlyRevenue",
    "CapitalSummary",
    "DashboardOverview",
]
