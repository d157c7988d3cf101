"""Spending aggregates for the dashboard."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from models.category import Category
from models.expense import Expense
from models.schemas.category import CategoryOutSchema
from models.schemas.common import to_money
from models.schemas.expense import ExpenseOutSchema

RECENT_LIMIT = 10

category_out_schema = CategoryOutSchema()
expense_list_out_schema = ExpenseOutSchema(many=True)


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First and last instant of the calendar month containing `now`."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - timedelta(microseconds=1)


def get_dashboard_stats(
    session,
    user_id: str,
    start: datetime | None = None,
    end: datetime | None = None,
    now: datetime | None = None,
) -> Dict[str, Any]:
    default_start, default_end = month_bounds(now or datetime.utcnow())
    start = start or default_start
    end = end or default_end

    in_period = (
        Expense.user_id == user_id,
        Expense.date >= start,
        Expense.date <= end,
    )

    total_amount, total_count = (
        session.query(func.sum(Expense.amount), func.count(Expense.id))
        .filter(*in_period)
        .one()
    )

    grouped = (
        session.query(Expense.category_id, func.sum(Expense.amount), func.count(Expense.id))
        .filter(*in_period)
        .group_by(Expense.category_id)
        .all()
    )
    categories = {
        c.id: c for c in session.query(Category).filter(Category.user_id == user_id).all()
    }
    breakdown = [
        {
            "category": category_out_schema.dump(categories[category_id])
            if category_id in categories else None,
            "totalAmount": str(to_money(amount)),
            "count": count,
        }
        for category_id, amount, count in grouped
    ]
    breakdown.sort(key=lambda item: to_money(item["totalAmount"]), reverse=True)

    recent = (
        session.query(Expense)
        .options(joinedload(Expense.category))
        .filter(Expense.user_id == user_id)
        .order_by(Expense.date.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    return {
        "summary": {
            "totalAmount": str(to_money(total_amount)),
            "totalCount": total_count,
            "period": {"start": start.isoformat(), "end": end.isoformat()},
        },
        "categoryBreakdown": breakdown,
        "recentExpenses": expense_list_out_schema.dump(recent),
    }
