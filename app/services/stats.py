"""Dashboard aggregates. Counts and sums run in the database; the 12-month
series bucket rows in Python, which is fine at this platform's volume."""
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.records import Transaction, TransactionStatus
from app.models.user import User, UserRole, UserStatus

TREND_MONTHS = 12


def _utc(dt: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if dt is None:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _month_starts(now: datetime, count: int) -> list[datetime]:
    """First instant of each of the last `count` months, oldest first, ending with now's month."""
    starts = []
    year, month = now.year, now.month
    for _ in range(count):
        starts.append(datetime(year, month, 1, tzinfo=timezone.utc))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def _next_month(start: datetime) -> datetime:
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def counts_by_role(db: Session) -> dict[UserRole, int]:
    rows = db.query(User.role, func.count(User.id)).group_by(User.role).all()
    return {role: n for role, n in rows}


def counts_by_status(db: Session) -> dict[UserStatus, int]:
    rows = db.query(User.status, func.count(User.id)).group_by(User.status).all()
    return {status: n for status, n in rows}


def completed_revenue(db: Session) -> float:
    total = (
        db.query(func.coalesce(func.sum(Transaction.amount), 0.0))
        .join(User, User.id == Transaction.user_id)
        .filter(Transaction.status == TransactionStatus.completed)
        .scalar()
    )
    return float(total or 0.0)


def growth_rate(active: int, total: int) -> float:
    if active <= 0 or total <= 0:
        return 0.0
    return round(active / total * 100, 1)


def admin_stats(db: Session) -> dict:
    by_status = counts_by_status(db)
    total = sum(by_status.values())
    active = by_status.get(UserStatus.active, 0)
    return {
        "total_users": total,
        "active_users": active,
        "revenue": completed_revenue(db),
        "growth_rate": growth_rate(active, total),
    }


def superadmin_stats(db: Session) -> dict:
    stats = admin_stats(db)
    by_role = counts_by_role(db)
    stats["users_by_role"] = {
        "admins": by_role.get(UserRole.admin, 0),
        "vendors": by_role.get(UserRole.vendor, 0),
        "customers": by_role.get(UserRole.customer, 0),
        "brokers": by_role.get(UserRole.broker, 0),
        "investors": by_role.get(UserRole.investor, 0),
    }
    return stats


def analytics(db: Session, now: datetime | None = None) -> dict:
    now = _utc(now) or datetime.now(timezone.utc)
    by_role = counts_by_role(db)
    by_status = counts_by_status(db)
    verified = (
        db.query(func.count(User.id))
        .filter((User.verified.is_(True)) | (User.is_email_verified.is_(True)))
        .scalar()
    ) or 0
    total = sum(by_status.values())

    joined = [_utc(c) for (c,) in db.query(User.created_at).all()]
    payments = [
        (_utc(created), amount)
        for created, amount in db.query(Transaction.created_at, Transaction.amount)
        .join(User, User.id == Transaction.user_id)
        .filter(Transaction.status == TransactionStatus.completed)
        .all()
    ]

    user_growth, revenue_trends = [], []
    for start in _month_starts(now, TREND_MONTHS):
        end = _next_month(start)
        label = start.strftime("%b %Y")
        user_growth.append({
            "month": label,
            "users": sum(1 for c in joined if c and start <= c < end),
            "cumulative": sum(1 for c in joined if c and c < end),
        })
        revenue_trends.append({
            "month": label,
            "revenue": float(sum(a for c, a in payments if c and start <= c < end)),
        })

    return {
        "user_distribution": {
            role.value: by_role.get(role, 0)
            for role in (UserRole.customer, UserRole.vendor, UserRole.broker, UserRole.investor, UserRole.admin)
        },
        "user_growth": user_growth,
        "revenue_trends": revenue_trends,
        "activity_trends": {
            "active": by_status.get(UserStatus.active, 0),
            "inactive": by_status.get(UserStatus.inactive, 0),
            "pending": by_status.get(UserStatus.pending, 0),
            "verified": verified,
            "unverified": total - verified,
        },
    }
