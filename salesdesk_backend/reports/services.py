# reports/services.py

"""
REPORTING QUERIES

Definitions:
- All date maths runs in the active timezone (TIME_ZONE).
- date_to covers the whole day.
- Cancelled sales never count towards totals unless status=cancelled
  is asked for explicitly.
- The week starts on Sunday. "Previous week" is the 7 days before it,
  "previous month" the calendar month before the current one.

Scoping:
- sales_for_user(): admins get every sale, staff their own.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from customers.models import Customer
from permissions.roles import CAP_SALES_VIEW_ALL, user_has_capability
from products.models import Product
from sales.models import Sale

ZERO = Decimal("0.00")

DASHBOARD_PERIODS = (7, 30)


# ============================================================
# HELPERS
# ============================================================


def _start_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def _money(value) -> str:
    return f"{Decimal(value or 0):.2f}"


def growth_percent(current, previous) -> float:
    current = Decimal(current or 0)
    previous = Decimal(previous or 0)
    if previous == 0:
        return 0.0
    return round(float((current - previous) / previous * 100), 1)


def week_start(day):
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_start(day):
    return day.replace(day=1)


def previous_month_start(day):
    first = month_start(day)
    return month_start(first - timedelta(days=1))


def _totals(qs) -> tuple[Decimal, int]:
    agg = qs.aggregate(total=Sum("total_amount"), count=Count("id"))
    return agg["total"] or ZERO, agg["count"] or 0


# ============================================================
# SHARED FILTER
# ============================================================


def sales_for_user(user):
    qs = Sale.objects.all()
    if not user_has_capability(user, CAP_SALES_VIEW_ALL):
        qs = qs.filter(issuer=user)
    return qs


def filter_sales(
    qs,
    *,
    date_from=None,
    date_to=None,
    customer: str = "",
    issuer: str = "",
    status: str = "",
):
    if date_from:
        qs = qs.filter(created_at__gte=_start_of_day(date_from))
    if date_to:
        qs = qs.filter(created_at__lt=_start_of_day(date_to + timedelta(days=1)))

    customer = (customer or "").strip()
    if customer:
        qs = qs.filter(customer_name__icontains=customer)

    issuer = (issuer or "").strip()
    if issuer:
        qs = qs.filter(issuer_name__icontains=issuer)

    if status:
        qs = qs.filter(status=status)
    else:
        qs = qs.exclude(status=Sale.STATUS_CANCELLED)

    return qs.order_by("-created_at")


def total_amount(qs) -> Decimal:
    return qs.aggregate(total=Sum("total_amount"))["total"] or ZERO


# ============================================================
# DASHBOARD
# ============================================================


def daily_series(qs, *, days: int, today=None) -> list[dict]:
    today = today or timezone.localdate()
    first_day = today - timedelta(days=days - 1)

    rows = (
        qs.filter(
            created_at__gte=_start_of_day(first_day),
            created_at__lt=_start_of_day(today + timedelta(days=1)),
        )
        .order_by()
        .annotate(day=TruncDate("created_at", tzinfo=timezone.get_current_timezone()))
        .values("day")
        .annotate(total=Sum("total_amount"), count=Count("id"))
    )
    by_day = {row["day"]: row for row in rows}

    series = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        row = by_day.get(day, {})
        series.append(
            {
                "date": day.isoformat(),
                "label": day.strftime("%b %d"),
                "total": _money(row.get("total")),
                "count": row.get("count", 0),
            }
        )
    return series


def dashboard_summary(*, user, days: int = 7, today=None) -> dict:
    if days not in DASHBOARD_PERIODS:
        raise ValueError(f"days must be one of {DASHBOARD_PERIODS}")

    today = today or timezone.localdate()
    qs = sales_for_user(user).exclude(status=Sale.STATUS_CANCELLED).filter(
        created_at__lt=_start_of_day(today + timedelta(days=1))
    )

    this_week = _start_of_day(week_start(today))
    last_week = this_week - timedelta(days=7)
    this_month = _start_of_day(month_start(today))
    last_month = _start_of_day(previous_month_start(today))

    week_total, week_count = _totals(qs.filter(created_at__gte=this_week))
    prev_week_total, _ = _totals(
        qs.filter(created_at__gte=last_week, created_at__lt=this_week)
    )
    month_total, month_count = _totals(qs.filter(created_at__gte=this_month))
    prev_month_total, _ = _totals(
        qs.filter(created_at__gte=last_month, created_at__lt=this_month)
    )
    all_total, all_count = _totals(qs)

    return {
        "weekly": {
            "total": _money(week_total),
            "count": week_count,
            "previous_total": _money(prev_week_total),
            "growth": growth_percent(week_total, prev_week_total),
        },
        "monthly": {
            "total": _money(month_total),
            "count": month_count,
            "previous_total": _money(prev_month_total),
            "growth": growth_percent(month_total, prev_month_total),
        },
        "totals": {
            "sales_total": _money(all_total),
            "sales_count": all_count,
            "products": Product.objects.filter(is_active=True).count(),
            "customers": Customer.objects.count(),
        },
        "series": daily_series(qs, days=days, today=today),
        "days": days,
    }
