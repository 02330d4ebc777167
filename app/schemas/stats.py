"""Admin and super admin dashboard aggregates."""
from app.schemas.base import APIModel


class UsersByRole(APIModel):
    admins: int = 0
    vendors: int = 0
    customers: int = 0
    brokers: int = 0
    investors: int = 0


class AdminStats(APIModel):
    total_users: int
    active_users: int
    revenue: float
    growth_rate: float


class SuperAdminStats(AdminStats):
    users_by_role: UsersByRole


class MonthlyUsers(APIModel):
    month: str
    users: int
    cumulative: int


class MonthlyRevenue(APIModel):
    month: str
    revenue: float


class ActivityTrends(APIModel):
    active: int
    inactive: int
    pending: int
    verified: int
    unverified: int


class Analytics(APIModel):
    user_distribution: dict[str, int]
    user_growth: list[MonthlyUsers]
    revenue_trends: list[MonthlyRevenue]
    activity_trends: ActivityTrends
