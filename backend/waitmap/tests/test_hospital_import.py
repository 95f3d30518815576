# tests/test_hospital_import.py
import pandas as pd
import pytest

from waitmap.models.hospital import Hospital
from waitmap.services import hospital_import
from waitmap.services.hospital_import import (
    build_address,
    hospital_rows_from_dataframe,
    hospital_rows_from_osm,
    insert_hospitals,
)


def test_build_address_prefers_full():
    assert build_address({"addr:full": "1 Main St, Abuja", "addr:street": "ignored"}) == "1 Main St, Abuja"


def test_build_address_joins_parts():
    assert build_address({"addr:housenumber": "12", "addr:street": "Herbert Macaulay Way", "addr:city": "Abuja"}) == "12 Herbert Macaulay Way Abuja"
    assert build_address({"addr:street": "Ahmadu Bello Way"}) == "Ahmadu Bello Way"
    assert build_address({}) is None


def test_rows_from_osm():
    elements = [
        {"lat": 9.04, "lon": 7.47, "tags": {"name": "National Hospital", "phone": "+234 1"}},
        {"lat": 9.05, "lon": 7.48, "tags": {}},
        {"tags": {"name": "No coordinates"}},
    ]
    rows = hospital_rows_from_osm(elements)

    assert len(rows) == 2
    assert rows[0]["phone"] == "+234 1"
    assert rows[0]["website"] is None
    assert rows[1]["name"] == "Unnamed hospital"


def test_fetch_osm_hospitals_posts_query(monkeypatch):
    calls = {}

    class FakeResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return {"elements": [{"lat": 1, "lon": 2, "tags": {}}]}

    def fake_post(url, data, headers, timeout):
        calls["url"] = url
        calls["data"] = data
        return FakeResponse()

    monkeypatch.setattr(hospital_import.requests, "post", fake_post)

    elements = hospital_import.fetch_osm_hospitals("1,2,3,4")

    assert elements == [{"lat": 1, "lon": 2, "tags": {}}]
    assert calls["url"] == hospital_import.OVERPASS_URL
    assert 'node["amenity"="hospital"](1,2,3,4);' in calls["data"]


def test_rows_from_dataframe():
    df = pd.DataFrame([
        {"name": " Garki Hospital ", "lat": "9.03", "lon": 7.49, "phone": None},
        {"name": "Broken", "lat": None, "lon": 7.0, "phone": None},
    ])
    rows = hospital_rows_from_dataframe(df)

    assert rows == [{"name": "Garki Hospital", "lat": 9.03, "lon": 7.49, "address": None, "phone": None, "website": None}]


def test_rows_from_dataframe_requires_columns():
    with pytest.raises(ValueError):
        hospital_rows_from_dataframe(pd.DataFrame([{"name": "x", "lat": 1.0}]))


def test_insert_hospitals(db_session):
    inserted = insert_hospitals(db_session, [{"name": "Wuse General Hospital", "lat": 9.06, "lon": 7.47}])

    assert inserted == 1
    assert db_session.query(Hospital).filter_by(name="Wuse General Hospital").count() == 1
