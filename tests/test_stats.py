"""Dashboard aggregates and super admin user management."""
from datetime import datetime, timezone

from app.models.records import Transaction, TransactionStatus
from app.models.user import UserRole, UserStatus
from app.services import stats as stats_service


def _payments(db, user, *rows):
    for amount, status in rows:
        db.add(Transaction(user_id=user.id, amount=amount, status=status))
    db.commit()


def test_growth_rate():
    assert stats_service.growth_rate(0, 0) == 0.0
    assert stats_service.growth_rate(0, 10) == 0.0
    assert stats_service.growth_rate(2, 3) == 66.7
    assert stats_service.growth_rate(4, 4) == 100.0


def test_admin_stats(client, db, admin, make_user, auth_headers):
    buyer = make_user(UserRole.customer)
    make_user(UserRole.investor, status=UserStatus.inactive)
    make_user(UserRole.broker, status=UserStatus.pending)
    _payments(
        db,
        buyer,
        (1000.0, TransactionStatus.completed),
        (250.5, TransactionStatus.completed),
        (999.0, TransactionStatus.pending),
        (50.0, TransactionStatus.failed),
    )

    r = client.get("/api/admin/stats", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json() == {"totalUsers": 4, "activeUsers": 2, "revenue": 1250.5, "growthRate": 50.0}


def test_superadmin_stats(client, db, superadmin, make_user, auth_headers):
    make_user(UserRole.admin)
    make_user(UserRole.vendor)
    make_user(UserRole.vendor)
    make_user(UserRole.customer)
    make_user(UserRole.partner)

    body = client.get("/api/superadmin/stats", headers=auth_headers(superadmin)).json()
    assert body["totalUsers"] == 6
    assert body["usersByRole"] == {"admins": 1, "vendors": 2, "customers": 1, "brokers": 0, "investors": 0}


def test_analytics_buckets_by_month(db, make_user):
    now = datetime(2026, 10, 16, tzinfo=timezone.utc)
    old = make_user(created_at=datetime(2025, 1, 5, tzinfo=timezone.utc))
    make_user(created_at=datetime(2026, 9, 15, tzinfo=timezone.utc))
    make_user(created_at=datetime(2026, 10, 1, tzinfo=timezone.utc), status=UserStatus.pending,
              is_email_verified=False)
    db.add(Transaction(user_id=old.id, amount=300.0, status=TransactionStatus.completed,
                       created_at=datetime(2026, 10, 2, tzinfo=timezone.utc)))
    db.add(Transaction(user_id=old.id, amount=75.0, status=TransactionStatus.pending,
                       created_at=datetime(2026, 10, 3, tzinfo=timezone.utc)))
    db.commit()

    data = stats_service.analytics(db, now=now)
    growth = data["user_growth"]
    assert len(growth) == 12
    assert growth[0] == {"month": "Nov 2025", "users": 0, "cumulative": 1}
    assert growth[-2] == {"month": "Sep 2026", "users": 1, "cumulative": 2}
    assert growth[-1] == {"month": "Oct 2026", "users": 1, "cumulative": 3}
    assert data["revenue_trends"][-1] == {"month": "Oct 2026", "revenue": 300.0}
    assert data["revenue_trends"][-2]["revenue"] == 0.0
    assert data["user_distribution"]["customer"] == 3
    assert data["activity_trends"]["pending"] == 1
    assert data["activity_trends"]["active"] == 2


def test_analytics_endpoint_shape(client, admin, auth_headers):
    body = client.get("/api/admin/analytics", headers=auth_headers(admin)).json()
    assert set(body) == {"userDistribution", "userGrowth", "revenueTrends", "activityTrends"}
    assert len(body["userGrowth"]) == 12


def test_users_by_role(client, superadmin, make_user, auth_headers):
    make_user(UserRole.broker)
    make_user(UserRole.customer)
    r = client.get("/api/superadmin/users/by-role", params={"role": "broker"}, headers=auth_headers(superadmin))
    assert r.status_code == 200
    assert [u["role"] for u in r.json()] == ["broker"]


def test_create_admin(client, db, superadmin, admin, customer, auth_headers):
    body = {"email": "customer@estatehub.in", "role": "admin"}
    assert client.post("/api/superadmin/create-admin", json=body, headers=auth_headers(admin)).status_code == 403

    r = client.post("/api/superadmin/create-admin", json=body, headers=auth_headers(superadmin))
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"

    r = client.post(
        "/api/superadmin/create-admin",
        json={"email": "customer@estatehub.in", "role": "broker"},
        headers=auth_headers(superadmin),
    )
    assert r.status_code == 400

    r = client.post(
        "/api/superadmin/create-admin",
        json={"email": "ghost@estatehub.in", "role": "admin"},
        headers=auth_headers(superadmin),
    )
    assert r.status_code == 404
