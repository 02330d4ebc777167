"""Documents, transactions, notifications and user administration."""
import pytest

from app.models.map_registration import MapRegistration
from app.models.records import Document, Notification, Transaction, TransactionStatus
from app.models.user import User, UserRole


def test_document_lifecycle(client, db, customer, admin, make_user, auth_headers):
    r = client.post(
        "/api/documents",
        json={"name": "Sale deed.pdf", "type": "application/pdf", "size": "1.2 MB", "url": "https://files/1"},
        headers=auth_headers(customer),
    )
    assert r.status_code == 201
    doc = r.json()
    assert doc["userId"] == customer.id
    assert doc["status"] == "pending"

    r = client.patch(f"/api/documents/{doc['id']}/status", json={"status": "verified"}, headers=auth_headers(customer))
    assert r.status_code == 403
    r = client.patch(f"/api/documents/{doc['id']}/status", json={"status": "verified"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["status"] == "verified"

    notes = client.get(f"/api/notifications/{customer.id}", headers=auth_headers(customer)).json()
    assert len(notes) == 1
    assert "verified" in notes[0]["title"]

    stranger = make_user()
    assert client.delete(f"/api/documents/{doc['id']}", headers=auth_headers(stranger)).status_code == 403
    assert client.delete(f"/api/documents/{doc['id']}", headers=auth_headers(customer)).status_code == 200
    assert client.delete(f"/api/documents/{doc['id']}", headers=auth_headers(customer)).status_code == 404


def test_document_name_required(client, customer, auth_headers):
    r = client.post("/api/documents", json={"name": "  "}, headers=auth_headers(customer))
    assert r.status_code == 400


def test_transactions(client, db, customer, admin, auth_headers):
    r = client.post(
        "/api/transactions",
        json={"amount": 2500, "method": "Credit Card", "description": "Booking fee"},
        headers=auth_headers(customer),
    )
    assert r.status_code == 201
    txn = r.json()
    assert txn["status"] == "pending"
    assert txn["method"] == "Credit Card"

    client.post("/api/transactions", json={"amount": 100, "method": "Razorpay"}, headers=auth_headers(customer))
    listed = client.get(f"/api/transactions/{customer.id}", headers=auth_headers(customer)).json()
    assert [t["amount"] for t in listed] == [100, 2500]

    r = client.patch(f"/api/transactions/{txn['id']}", json={"status": "completed"}, headers=auth_headers(customer))
    assert r.status_code == 403
    r = client.patch(
        f"/api/transactions/{txn['id']}",
        json={"status": "completed", "transactionId": "pay_123"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["status"] == "completed"
    assert r.json()["transactionId"] == "pay_123"


def test_transaction_amount_must_be_positive(client, customer, auth_headers):
    r = client.post("/api/transactions", json={"amount": 0}, headers=auth_headers(customer))
    assert r.status_code == 400


def test_notification_flow(client, db, customer, admin, make_user, auth_headers):
    r = client.post(
        "/api/notifications",
        json={"userId": customer.id, "title": "Site visit", "message": "Tomorrow at 10am", "type": "info"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 201
    nid = r.json()["id"]
    assert r.json()["read"] is False

    r = client.post(
        "/api/notifications",
        json={"userId": customer.id, "title": "x", "message": "y"},
        headers=auth_headers(customer),
    )
    assert r.status_code == 403

    stranger = make_user()
    assert client.patch(f"/api/notifications/{nid}/read", headers=auth_headers(stranger)).status_code == 403
    r = client.patch(f"/api/notifications/{nid}/read", headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["read"] is True

    assert client.patch("/api/notifications/999/read", headers=auth_headers(customer)).status_code == 404
    assert client.delete(f"/api/notifications/{nid}", headers=auth_headers(stranger)).status_code == 403
    assert client.delete(f"/api/notifications/{nid}", headers=auth_headers(admin)).status_code == 200


def test_notification_for_unknown_user(client, admin, auth_headers):
    r = client.post(
        "/api/notifications",
        json={"userId": 999, "title": "x", "message": "y"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 404


def test_mark_all_read_only_touches_own(client, db, customer, make_user, auth_headers):
    other = make_user()
    db.add_all([
        Notification(user_id=customer.id, title="a", message="a"),
        Notification(user_id=customer.id, title="b", message="b"),
        Notification(user_id=other.id, title="c", message="c"),
    ])
    db.commit()
    r = client.patch("/api/notifications/read-all", headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["updated"] == 2
    db.expire_all()
    assert db.query(Notification).filter(Notification.read.is_(False)).count() == 1


def test_list_users_hides_password(client, admin, customer, auth_headers):
    r = client.get("/api/users", headers=auth_headers(admin))
    assert r.status_code == 200
    assert len(r.json()) == 2
    for user in r.json():
        assert "password" not in user
        assert "hashedPassword" not in user


def test_admin_updates_user(client, customer, admin, auth_headers):
    r = client.put(
        f"/api/users/{customer.id}",
        json={"role": "investor", "status": "inactive", "company": "Acme Realty"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "investor"
    assert body["status"] == "inactive"
    assert body["company"] == "Acme Realty"
    assert body["email"] == "customer@estatehub.in"

    assert client.put(f"/api/users/{customer.id}", json={}, headers=auth_headers(customer)).status_code == 403
    assert client.put("/api/users/999", json={}, headers=auth_headers(admin)).status_code == 404


def test_delete_user_removes_owned_rows(client, db, customer, admin, auth_headers):
    uid = customer.id
    db.add_all([
        Document(user_id=uid, name="deed"),
        Transaction(user_id=uid, amount=10.0, status=TransactionStatus.completed),
        Notification(user_id=uid, title="t", message="m"),
        MapRegistration(user_id=uid, name="c", email="c@mail.com", role=UserRole.customer, address="x", pincode="380015"),
    ])
    db.commit()

    r = client.delete(f"/api/users/{uid}", headers=auth_headers(admin))
    assert r.status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.id == uid).count() == 0
    for model in (Document, Transaction, Notification, MapRegistration):
        assert db.query(model).filter(model.user_id == uid).count() == 0


def test_assign_role_by_email(client, customer, admin, superadmin, auth_headers):
    r = client.post(
        "/api/users/admin",
        json={"email": "customer@estatehub.in", "role": "partner"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "partner"

    r = client.post(
        "/api/users/admin",
        json={"email": "customer@estatehub.in", "role": "admin"},
        headers=auth_headers(superadmin),
    )
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"

    r = client.post(
        "/api/users/admin",
        json={"email": "ghost@estatehub.in", "role": "admin"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 404


@pytest.mark.parametrize("role", ["admin", "superadmin"])
def test_admin_cannot_grant_privileged_roles(client, db, customer, admin, auth_headers, role):
    headers = auth_headers(admin)
    r = client.post("/api/users/admin", json={"email": "customer@estatehub.in", "role": role}, headers=headers)
    assert r.status_code == 403
    assert client.put(f"/api/users/{customer.id}", json={"role": role}, headers=headers).status_code == 403
    # not even for themselves
    assert client.put(f"/api/users/{admin.id}", json={"role": "superadmin"}, headers=headers).status_code == 403

    db.expire_all()
    assert db.query(User).filter(User.id == customer.id).one().role == UserRole.customer
    assert db.query(User).filter(User.id == admin.id).one().role == UserRole.admin


def test_admin_cannot_demote_super_admin(client, admin, superadmin, auth_headers):
    r = client.put(f"/api/users/{superadmin.id}", json={"role": "customer"}, headers=auth_headers(admin))
    assert r.status_code == 403


def test_profile_self_service(client, customer, auth_headers):
    r = client.patch(
        "/api/auth/me",
        json={"name": "Riya Shah", "phone": "+91 98765 43210"},
        headers=auth_headers(customer),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Riya Shah"
    assert r.json()["phone"] == "+91 98765 43210"

    r = client.patch("/api/auth/me", json={"phone": "123"}, headers=auth_headers(customer))
    assert r.status_code == 400
    r = client.get("/api/auth/me", headers=auth_headers(customer))
    assert r.json()["email"] == "customer@estatehub.in"


def test_profile_phone_can_be_cleared(client, db, customer, auth_headers):
    headers = auth_headers(customer)
    client.patch("/api/auth/me", json={"phone": "+91 98765 43210"}, headers=headers)

    r = client.patch("/api/auth/me", json={"name": "Riya"}, headers=headers)
    assert r.json()["phone"] == "+91 98765 43210"

    r = client.patch("/api/auth/me", json={"phone": "  "}, headers=headers)
    assert r.status_code == 200
    assert r.json()["phone"] is None
    db.expire_all()
    assert db.query(User).filter(User.id == customer.id).one().phone is None
