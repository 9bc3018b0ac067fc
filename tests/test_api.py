"""Tests for the HTTP API."""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from cuboid_packer.api import app
from cuboid_packer.settings import Settings, get_settings

client = TestClient(app)


@pytest.fixture(autouse=True)
def default_settings():
    app.dependency_overrides[get_settings] = lambda: Settings()
    yield
    app.dependency_overrides.clear()


def deck_and_die() -> dict:
    return {
        "bin": {"length": 8, "width": 8, "height": 12},
        "items": [
            {"id": "deck", "length": 2, "width": 8, "height": 12, "quantity": 2},
            {"id": "die", "length": 8, "width": 8, "height": 8},
            {"id": "deck", "length": 12, "width": 2, "height": 8, "quantity": 2},
        ],
    }


def test_pack_success() -> None:
    """Test that /pack returns bins in opening order with metrics."""
    response = client.post("/pack", json=deck_and_die())

    assert response.status_code == 200
    data = response.json()
    assert data["bin_count"] == 2
    assert data["item_count"] == 5
    assert [b["item_ids"] for b in data["bins"]] == [["deck"] * 4, ["die"]]
    assert [b["index"] for b in data["bins"]] == [0, 1]
    assert data["bins"][1]["fill_rate"] == pytest.approx(512 / 768)
    assert 0.0 < data["fill_rate"] <= 1.0


def test_pack_items_do_not_fit() -> None:
    """Test that an oversized item returns a friendly 422."""
    request = {
        "bin": {"length": 3, "width": 3, "height": 3},
        "items": [
            {"id": "ok", "length": 1, "width": 1, "height": 1},
            {"id": "pole", "length": 1, "width": 1, "height": 4},
        ],
    }
    response = client.post("/pack", json=request)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "ITEMS_DO_NOT_FIT"
    assert detail["details"] == ["pole"]
    assert "All items must fit" in detail["summary"]


def test_pack_unknown_preset() -> None:
    request = {"bin_preset": "45XL", "items": [{"id": "a", "length": 1, "width": 1, "height": 1}]}
    response = client.post("/pack", json=request)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "UNKNOWN_BIN_PRESET"


def test_pack_with_preset() -> None:
    request = {"bin_preset": "40HC", "items": [{"id": "pallet", "length": 1.2, "width": 0.8, "height": 1.5, "quantity": 3}]}
    response = client.post("/pack", json=request)

    assert response.status_code == 200
    assert response.json()["bins"][0]["item_ids"] == ["pallet"] * 3


def test_pack_too_many_items() -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(max_items=3)
    response = client.post("/pack", json=deck_and_die())

    assert response.status_code == 413
    detail = response.json()["detail"]
    assert detail["error"] == "TOO_MANY_ITEMS"
    assert detail["details"] == {"count": 5, "limit": 3}


def test_pack_int_scalar_rejects_fractional_dims() -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(scalar="int")
    request = {"bin": {"length": 3, "width": 3, "height": 3}, "items": [{"id": "a", "length": 1.5, "width": 1, "height": 1}]}
    response = client.post("/pack", json=request)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "INVALID_DIMENSIONS"


@pytest.mark.parametrize(
    "request_body",
    [
        {"items": [{"id": "a", "length": 1, "width": 1, "height": 1}]},
        {"bin": {"length": 1, "width": 1, "height": 1}, "bin_preset": "20", "items": [{"id": "a", "length": 1, "width": 1, "height": 1}]},
        {"bin": {"length": 1, "width": 1, "height": 1}, "items": []},
        {"bin": {"length": 0, "width": 1, "height": 1}, "items": [{"id": "a", "length": 1, "width": 1, "height": 1}]},
        {"bin": {"length": 1, "width": 1, "height": 1}, "items": [{"id": "a", "length": 1, "width": 1, "height": 1, "quantity": 0}]},
    ],
)
def test_pack_validation_errors(request_body) -> None:
    """Test that malformed requests are rejected by validation."""
    assert client.post("/pack", json=request_body).status_code == 422


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "scalar": "auto", "exact_fit_tolerance": "0", "max_items": None}


def test_presets() -> None:
    data = client.get("/presets").json()
    assert data["units"] == "m"
    assert data["presets"]["40HC"] == [12.032, 2.35, 2.7]
    assert data["presets"]["52HC"] == data["presets"]["53HC"]


def test_startup_applies_configured_log_level(monkeypatch, caplog) -> None:
    """Test that the app applies CUBOID_PACKER_LOG_LEVEL so the pack summary is logged."""
    monkeypatch.setenv("CUBOID_PACKER_LOG_LEVEL", "INFO")
    package_logger = logging.getLogger("cuboid_packer")
    try:
        with TestClient(app) as started:
            assert package_logger.level == logging.INFO
            assert started.post("/pack", json=deck_and_die()).status_code == 200
    finally:
        package_logger.setLevel(logging.NOTSET)

    assert any("packed_items=5" in record.getMessage() for record in caplog.records)
