"""
Tests for the HTTP API.
"""

from __future__ import annotations

import pytest

from app import app as flask_app

PASTE = (
    "조회기간:2024.01.01~2024.01.07\n"
    "구분\tA\tB\n"
    "NE Books\t1,000\t800\n"
    "NE Times\t500\t0\n"
)


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client


class TestHealth:
    def test_health(self, client) -> None:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "online"


class TestParse:
    def test_json_body(self, client) -> None:
        resp = client.post("/api/parse", json={"text": PASTE})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["table"]["period"] == "2024.01.01~2024.01.07"
        assert body["table"]["rows"]["NE Books"] == [1000.0, 800.0]
        assert body["preview"]["NE Times"] == [500.0, 0.0, 0.0, 0.0, 0.0, 0.0]
        assert len(body["preview_headers"]) == 6

    def test_form_field(self, client) -> None:
        resp = client.post("/api/parse", data={"data": PASTE})
        assert resp.get_json()["table"]["headers"] == ["A", "B"]

    def test_raw_body(self, client) -> None:
        resp = client.post(
            "/api/parse", data=PASTE.encode("utf-8"), content_type="text/plain"
        )
        assert resp.get_json()["table"]["rows"]["NE Times"] == [500.0, 0.0]

    def test_json_without_text(self, client) -> None:
        resp = client.post("/api/parse", json={"nope": 1})
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False

    def test_invalid_utf8_body(self, client) -> None:
        resp = client.post(
            "/api/parse", data=b"\xff\xfe", content_type="text/plain"
        )
        assert resp.status_code == 400

    def test_garbage_is_empty_not_error(self, client) -> None:
        resp = client.post("/api/parse", json={"text": "no table here"})
        assert resp.status_code == 200
        assert resp.get_json()["success"] is False


class TestReport:
    def test_report(self, client) -> None:
        resp = client.post("/api/report", json={"text": PASTE})
        assert resp.status_code == 200
        body = resp.get_json()
        report = body["report"]
        assert report["week_label"] == "1주차"
        first = report["sections"][0]["rows"][0]
        assert first["key"] == "total"
        assert first["values"][0] == 1000.0
        assert first["display"]["values"][0] == "1,000"
        rate = report["sections"][0]["rows"][2]
        assert rate["display"]["values"][0] == "20.0%"
        assert "grand_total" in report["sections"][1]["rows"][0]["display"]
        assert body["validation_warnings"]


class TestResolve:
    def test_resolve(self, client) -> None:
        resp = client.post(
            "/api/resolve",
            json={"text": PASTE, "paths": ["NE Books/1+NE Times/1", "NE Books/99"]},
        )
        assert resp.status_code == 200
        results = resp.get_json()["results"]
        assert results[0]["value"] == 1500.0
        assert results[0]["detail"] == "NE Books: 1,000 + NE Times: 500 = 1,500"
        assert results[1]["value"] == 0.0

    def test_bad_paths(self, client) -> None:
        resp = client.post("/api/resolve", json={"text": PASTE, "paths": "NE Books/1"})
        assert resp.status_code == 400


class TestXlsx:
    def test_download(self, client) -> None:
        resp = client.post("/api/report.xlsx", json={"text": PASTE})
        assert resp.status_code == 200
        assert resp.mimetype.endswith("spreadsheetml.sheet")
        assert resp.data[:2] == b"PK"
        assert "membership_report_2024.01.xlsx" in resp.headers["Content-Disposition"]
