from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from main import app


client = TestClient(app)

EXAMPLE = {
    "bull": {"x": 0, "y": 0},
    "poib": {"x": -2.0, "y": 1.5},
    "distanceYards": 100,
    "clickValueMoa": 0.25,
}


def test_health_reports_service() -> None:
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["service"] == "sec-backend"


def test_root_lists_endpoints() -> None:
    body = client.get("/").json()
    assert "POST /api/sec/calc" in body["endpoints"]


def test_calc_worked_example() -> None:
    res = client.post("/api/sec/calc", json=EXAMPLE)
    assert res.status_code == 200
    assert res.json()["success"] is True
    assert "error" not in res.json()
    data = res.json()["data"]

    assert data["deltas"] == {"dx": 2.0, "dy": -1.5}
    assert data["windage"] == {"direction": "RIGHT", "moa": 1.91, "clicks": 7.64, "dial": "RIGHT 7.64 clicks"}
    assert data["elevation"] == {"direction": "DOWN", "moa": 1.43, "clicks": 5.73, "dial": "DOWN 5.73 clicks"}
    assert data["inputs"]["trueMoaInchesAt100"] == pytest.approx(1.047)
    assert data["inputs"]["sampleCount"] == 1
    assert data["arrow"] == {"x1": -2.0, "y1": 1.5, "x2": 0.0, "y2": 0.0}
    assert data["score"]["score"] == 75


def test_calc_from_holes() -> None:
    payload = {**EXAMPLE, "poib": None, "holes": [{"x": -1, "y": 1}, {"x": -3, "y": 2}]}
    data = client.post("/api/sec/calc", json=payload).json()["data"]
    assert data["poib"] == {"x": -2.0, "y": 1.5}
    assert data["inputs"]["sampleCount"] == 2
    assert data["windage"]["clicks"] == 7.64


def test_calc_from_pixels_matches_inches() -> None:
    payload = {
        "bull": {"x": 500, "y": 500},
        "holes": [{"x": 470, "y": 480}, {"x": 490, "y": 490}],
        "pxPerInch": 10,
        "yAxis": "down",
        "distanceYards": 100,
        "clickValueMoa": 0.25,
    }
    data = client.post("/api/sec/calc", json=payload).json()["data"]
    assert data["poib"] == {"x": -2.0, "y": 1.5}
    assert data["windage"]["direction"] == "RIGHT"
    assert data["inputs"]["bull"] == {"x": 500.0, "y": 500.0}
    assert data["arrow"]["x2"] == 0.0 and data["arrow"]["y2"] == 0.0
    assert data["elevation"]["direction"] == "DOWN"
    assert data["elevation"]["clicks"] == 5.73


def test_calc_shooter_moa() -> None:
    payload = {**EXAMPLE, "poib": {"x": -2.0, "y": 0.0}, "trueMoa": False}
    data = client.post("/api/sec/calc", json=payload).json()["data"]
    assert data["windage"]["moa"] == 2.0
    assert data["windage"]["clicks"] == 8.0


@pytest.mark.parametrize(
    "override, code",
    [
        ({"distanceYards": 0}, "BAD_DISTANCE"),
        ({"clickValueMoa": -0.25}, "BAD_CLICK"),
        ({"trueMoaInchesAt100": 0}, "BAD_MOA_STANDARD"),
        ({"poib": None, "holes": []}, "EMPTY_SAMPLE"),
        ({"pxPerInch": 0, "yAxis": "down"}, "BAD_SCALE"),
    ],
)
def test_calc_domain_errors_are_400(override: dict, code: str) -> None:
    res = client.post("/api/sec/calc", json={**EXAMPLE, **override})
    assert res.status_code == 400
    assert res.json()["detail"]["code"] == code


def test_calc_requires_exactly_one_point_source() -> None:
    both = {**EXAMPLE, "holes": [{"x": 1, "y": 1}]}
    assert client.post("/api/sec/calc", json=both).status_code == 422
    neither = {**EXAMPLE, "poib": None}
    assert client.post("/api/sec/calc", json=neither).status_code == 422


def test_calc_pixel_scale_requires_axis() -> None:
    res = client.post("/api/sec/calc", json={**EXAMPLE, "pxPerInch": 10})
    assert res.status_code == 422


def test_calc_axis_without_pixel_scale_is_rejected() -> None:
    payload = {**EXAMPLE, "bull": {"x": 500, "y": 500}, "poib": {"x": 480, "y": 515}, "yAxis": "down"}
    res = client.post("/api/sec/calc", json=payload)
    assert res.status_code == 422
    assert "pxPerInch" in res.json()["detail"][0]["msg"]


def test_calc_rejects_non_finite_numbers() -> None:
    body = '{"poib": {"x": NaN, "y": 1.5}, "distanceYards": 100}'
    res = client.post("/api/sec/calc", content=body, headers={"Content-Type": "application/json"})
    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail[0]["type"] == "finite_number"
    assert detail[0]["input"] == "nan"


def test_score_endpoint() -> None:
    res = client.post("/api/sec/score", json={"poib": {"x": 3, "y": 4}})
    assert res.status_code == 200
    assert res.json()["data"] == {
        "offsetInches": 5.0,
        "score": 50,
        "tip": "fundamentals: sight picture + press, run another group",
    }


def test_score_empty_holes_is_400() -> None:
    res = client.post("/api/sec/score", json={"holes": []})
    assert res.status_code == 400
    assert res.json()["detail"]["code"] == "EMPTY_SAMPLE"


def test_calc_tiny_distance_is_answered() -> None:
    res = client.post("/api/sec/calc", json={**EXAMPLE, "distanceYards": 1e-25})
    assert res.status_code == 200
    assert res.json()["data"]["windage"]["direction"] == "RIGHT"
