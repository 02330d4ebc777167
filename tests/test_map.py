"""Territory map registrations and geo lookups."""
import pytest

from app.config import get_settings
from app.errors import NotFound, UpstreamUnavailable
from app.models.map_registration import MapRegistration
from app.services import geo


@pytest.fixture
def provider_key(monkeypatch):
    monkeypatch.setattr(get_settings(), "map_provider_api_key", "test-key")


def test_register_upserts_single_row(client, db, customer, auth_headers):
    headers = auth_headers(customer)
    first = {"address": "12 CG Road", "pincode": "380009", "latitude": 23.03, "longitude": 72.56}
    second = {"address": "4 Prahlad Nagar", "pincode": "380015", "locality": "Satellite",
              "latitude": 23.01, "longitude": 72.51}

    assert client.post("/api/map/register", json=first, headers=headers).status_code == 200
    r = client.post("/api/map/register", json=second, headers=headers)
    assert r.status_code == 200
    assert r.json()["pincode"] == "380015"
    assert r.json()["name"] == customer.name

    rows = db.query(MapRegistration).filter(MapRegistration.user_id == customer.id).all()
    assert len(rows) == 1
    assert rows[0].address == "4 Prahlad Nagar"
    assert rows[0].latitude == 23.01


def test_register_geocodes_from_pincode_table(client, customer, auth_headers):
    r = client.post(
        "/api/map/register", json={"address": "Near ISRO", "pincode": "380015"}, headers=auth_headers(customer)
    )
    assert r.status_code == 200
    assert r.json()["latitude"] == 23.0300
    assert r.json()["longitude"] == 72.5170


def test_register_unknown_pincode_without_coordinates(client, customer, auth_headers):
    r = client.post(
        "/api/map/register", json={"address": "Somewhere", "pincode": "110001"}, headers=auth_headers(customer)
    )
    assert r.status_code == 200
    assert r.json()["latitude"] is None


@pytest.mark.parametrize("body", [
    {"address": "x", "pincode": "380015", "latitude": 91, "longitude": 72.5},
    {"address": "x", "pincode": "380015", "latitude": 23.0},
    {"address": "", "pincode": "380015"},
])
def test_register_validation(client, customer, auth_headers, body):
    assert client.post("/api/map/register", json=body, headers=auth_headers(customer)).status_code == 400


def test_check_registration(client, customer, auth_headers):
    headers = auth_headers(customer)
    assert client.get("/api/map/check-registration", headers=headers).json() == {
        "registered": False,
        "registration": None,
    }
    client.post("/api/map/register", json={"address": "x", "pincode": "380001"}, headers=headers)
    body = client.get("/api/map/check-registration", headers=headers).json()
    assert body["registered"] is True
    assert body["registration"]["pincode"] == "380001"


def test_registrations_filter_by_pincode(client, make_user, auth_headers):
    for pincode in ("380015", "380015", "380009"):
        user = make_user()
        client.post("/api/map/register", json={"address": "x", "pincode": pincode}, headers=auth_headers(user))
    viewer = make_user()
    r = client.get("/api/map/registrations", params={"pincode": "380015"}, headers=auth_headers(viewer))
    assert r.status_code == 200
    assert [reg["pincode"] for reg in r.json()] == ["380015", "380015"]
    assert len(client.get("/api/map/registrations", headers=auth_headers(viewer)).json()) == 3


def test_map_requires_session(client):
    assert client.get("/api/map/registrations").status_code == 401


def test_boundary_from_table(client, customer, auth_headers):
    r = client.get("/api/map/boundary/380015", headers=auth_headers(customer))
    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "fallback"
    assert body["center"] == [23.03, 72.517]
    assert len(body["coordinates"]) == 5


def test_unknown_boundary_is_404(client, customer, auth_headers):
    assert client.get("/api/map/boundary/999999", headers=auth_headers(customer)).status_code == 404


def test_pincode_listing(client, customer, auth_headers):
    body = client.get("/api/map/pincodes", headers=auth_headers(customer)).json()
    assert len(body) == 10
    assert body[0]["pincode"] == "380001"


def test_geocode_needs_a_query(client, customer, auth_headers):
    assert client.get("/api/map/geocode", headers=auth_headers(customer)).status_code == 400
    r = client.get("/api/map/geocode", params={"pincode": "380009"}, headers=auth_headers(customer))
    assert r.json() == {"latitude": 23.037, "longitude": 72.556, "source": "fallback"}


def test_outer_ring_swaps_to_lat_lng():
    polygon = {"type": "Polygon", "coordinates": [[[72.5, 23.0], [72.6, 23.0], [72.6, 23.1]]]}
    assert geo._outer_ring(polygon) == [[23.0, 72.5], [23.0, 72.6], [23.1, 72.6]]
    multi = {"type": "MultiPolygon", "coordinates": [[[[1, 2]]], [[[3, 4], [5, 6]]]]}
    assert geo._outer_ring(multi) == [[4.0, 3.0], [6.0, 5.0]]
    assert geo._outer_ring({"type": "Point", "coordinates": [72.5, 23.0]}) == []


def test_provider_boundary(provider_key, monkeypatch):
    hit = {
        "lat": "23.03",
        "lon": "72.51",
        "display_name": "Satellite, Ahmedabad",
        "geojson": {"type": "Polygon", "coordinates": [[[72.50, 23.02], [72.52, 23.02], [72.52, 23.04]]]},
    }
    monkeypatch.setattr(geo, "_search", lambda query, polygon=False: hit)
    b = geo.boundary("380015")
    assert b.source == geo.SOURCE_PROVIDER
    assert b.center == [23.03, 72.51]
    assert b.coordinates[0] == [23.02, 72.50]


def test_provider_failure_falls_back(provider_key, monkeypatch):
    def down(query, polygon=False):
        raise UpstreamUnavailable()

    monkeypatch.setattr(geo, "_search", down)
    assert geo.boundary("380015").source == geo.SOURCE_FALLBACK
    point = geo.geocode("CG Road", "380009")
    assert (point.latitude, point.longitude, point.source) == (23.037, 72.556, geo.SOURCE_FALLBACK)
    with pytest.raises(NotFound):
        geo.geocode("Nowhere", "999999")


def test_provider_geocode(provider_key, monkeypatch):
    queries = []

    def search(query, polygon=False):
        queries.append(query)
        return {"lat": "23.0401", "lon": "72.5612"}

    monkeypatch.setattr(geo, "_search", search)
    point = geo.geocode("12 CG Road", "380009")
    assert point.source == geo.SOURCE_PROVIDER
    assert point.latitude == 23.0401
    assert queries == ["12 CG Road, 380009, Ahmedabad"]
