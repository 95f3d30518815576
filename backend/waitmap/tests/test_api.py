# tests/test_api.py
import io

from waitmap.endpoints.ws_reports import ReportFeed, get_report_feed, report_feed
from waitmap.main import app
from waitmap.models.hospital import Hospital, Report


def test_root(client):
    assert client.get("/").json() == {"message": "API is running"}


def test_map_config(client):
    body = client.get("/config").json()

    assert body["center"] == {"lat": 9.07, "lon": 7.45}
    assert body["zoom"] == 12


def test_list_hospitals_sorted_by_name(client, hospitals):
    body = client.get("/hospitals").json()

    assert [h["name"] for h in body] == ["Garki Hospital", "Kubwa General Hospital", "National Hospital Abuja"]
    assert body[0]["band"] == "NoData"
    assert body[0]["aggregated_wait"]["report_count"] == 0
    assert body[0]["updated_text"] == "no reports yet"


def test_search_is_case_insensitive(client, hospitals):
    body = client.get("/hospitals", params={"q": "  GARKI "}).json()

    assert [h["name"] for h in body] == ["Garki Hospital"]


def test_sort_by_distance(client, hospitals):
    body = client.get("/hospitals", params={"lat": 9.15, "lon": 7.32}).json()

    assert body[0]["name"] == "Kubwa General Hospital"
    assert body[0]["distance_km"] < body[1]["distance_km"]


def test_unknown_hospital_is_404(client, hospitals):
    assert client.get("/hospitals/9999").status_code == 404
    assert client.post("/hospitals/9999/reports", json={"wait": "10"}).status_code == 404


def test_submit_report_updates_aggregate(client, hospitals, db_session):
    hid = hospitals[1].id

    first = client.post(f"/hospitals/{hid}/reports", json={"wait": "40", "capacity": "2", "comment": " calm "})
    second = client.post(f"/hospitals/{hid}/reports", json={"wait": "80", "capacity": "", "comment": ""})

    assert first.status_code == 201
    assert first.json()["comment"] == "calm"
    assert second.json()["capacity_enum"] is None
    assert db_session.query(Report).filter_by(hospital_id=hid).count() == 2

    view = client.get(f"/hospitals/{hid}").json()
    assert view["aggregated_wait"]["est_wait"] == 60
    assert view["aggregated_wait"]["capacity_enum"] == 2
    assert view["aggregated_wait"]["report_count"] == 2
    assert view["band"] == "Medium"
    assert view["capacity_text"] == "Plenty of beds available"
    assert view["updated_text"] == "just now"
    assert [r["wait_minutes"] for r in view["recent_reports"]] == [80, 40]


def test_submit_report_validation_errors(client, hospitals):
    hid = hospitals[0].id

    missing = client.post(f"/hospitals/{hid}/reports", json={"comment": "fine"})
    too_long = client.post(f"/hospitals/{hid}/reports", json={"wait": "800"})
    comment = client.post(f"/hospitals/{hid}/reports", json={"wait": "10", "comment": "x" * 281})

    assert missing.status_code == 422
    assert missing.json()["detail"]["kind"] == "MissingData"
    assert too_long.json()["detail"]["kind"] == "InvalidWaitRange"
    assert comment.json()["detail"]["kind"] == "CommentTooLong"


def test_submit_report_huge_wait_is_422(client, hospitals):
    response = client.post(f"/hospitals/{hospitals[0].id}/reports", json={"wait": "9" * 5000})

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "InvalidWaitRange"


def test_list_reports(client, hospitals):
    hid = hospitals[0].id
    for wait in ("5", "15", "25"):
        client.post(f"/hospitals/{hid}/reports", json={"wait": wait})

    body = client.get(f"/hospitals/{hid}/reports", params={"limit": 2}).json()

    assert [r["wait_minutes"] for r in body] == [25, 15]


def test_markers(client, hospitals):
    client.post(f"/hospitals/{hospitals[2].id}/reports", json={"wait": "200"})

    markers = {m["name"]: m for m in client.get("/hospitals/markers").json()}

    assert markers["Kubwa General Hospital"]["band"] == "VeryLong"
    assert markers["Kubwa General Hospital"]["color"] == "#F44336"
    assert markers["Garki Hospital"]["popup_lines"][0] == "No wait time data"


def test_submit_report_publishes_insert_event(client, hospitals):
    events = []

    class RecordingFeed(ReportFeed):
        async def publish(self, event):
            events.append(event)

    app.dependency_overrides[get_report_feed] = lambda: RecordingFeed()
    hid = hospitals[0].id

    client.post(f"/hospitals/{hid}/reports", json={"wait": "30", "capacity": "1"})

    assert len(events) == 1
    assert events[0]["event"] == "INSERT"
    assert events[0]["table"] == "reports"
    assert events[0]["hospital_id"] == hid
    assert events[0]["aggregated_wait"]["est_wait"] == 30


def test_report_feed_websocket_registers_client(client):
    with client.websocket_connect("/ws/reports"):
        assert report_feed.clients


def test_upload_csv(client, db_session):
    csv = b"name,lat,lon,phone\nAsokoro District Hospital,9.0435,7.5225,\nMaitama District Hospital,9.0829,7.4952,+234 2\n"

    response = client.post("/hospitals/upload-csv", files={"file": ("hospitals.csv", io.BytesIO(csv), "text/csv")})

    assert response.status_code == 200
    assert response.json()["inserted"] == 2
    assert db_session.query(Hospital).filter_by(name="Maitama District Hospital").one().phone == "+234 2"


def test_upload_csv_rejects_bad_files(client):
    wrong_type = client.post("/hospitals/upload-csv", files={"file": ("hospitals.txt", io.BytesIO(b"x"), "text/plain")})
    missing_cols = client.post("/hospitals/upload-csv", files={"file": ("h.csv", io.BytesIO(b"name,lat\nA,1\n"), "text/csv")})

    assert wrong_type.status_code == 400
    assert missing_cols.status_code == 400
