"""
Endpoint tests against a seeded service (the background ticker never runs).
"""

import pytest
from fastapi.testclient import TestClient

from air_indices.app import app
from air_indices.history import HistoryBuffer
from air_indices.service import IndicesService, get_service
from air_indices.simulator import RandomWalkSource
from air_indices.snapshot import MeasurementSnapshot


@pytest.fixture
def service():
    svc = IndicesService(source=RandomWalkSource(seed=1), history=HistoryBuffer(100))
    app.dependency_overrides[get_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    return TestClient(app)


@pytest.fixture
def ticked(service):
    for _ in range(30):
        service.tick()
    return service


def test_data(client, ticked):
    body = client.get("/data").json()

    assert set(body) == {"timestamp", "measures", "indices"}
    assert body["measures"] == ticked.state.get().measures()
    for key in ("AQL", "TCI", "SRI", "GEI", "GAQI"):
        assert 0 <= body["indices"][key] <= 100


def test_data_neutral_state(client, service):
    service.record(MeasurementSnapshot.capture(
        {"co2": 600, "no2": 40, "nh3": 0.01, "co": 0.5, "temp": 22, "rh": 50, "pres": 1013}
    ))

    indices = client.get("/data").json()["indices"]

    assert indices["AQL"] == 100
    assert indices["GEI"] == 100
    assert indices["GAQI"] == 100


def test_history(client, ticked):
    body = client.get("/history", params={"sec": 60}).json()

    assert body["requested_sec"] == 60
    assert body["length"] == 30
    restored = [MeasurementSnapshot.from_dict(entry) for entry in body["series"]]
    assert restored == ticked.history.snapshot()


def test_history_huge_lookback(client, ticked):
    response = client.get("/history", params={"sec": 10 ** 11})

    assert response.status_code == 200
    assert response.json()["length"] == 30


def test_corr_and_scatterbar_huge_lookback(client, ticked):
    assert client.get("/corr", params={"sec": 10 ** 11}).status_code == 200
    assert client.get("/scatterbar", params={"sec": 10 ** 11, "step": 10}).json()["count"] == 3


def test_history_rejects_bad_window(client, service):
    assert client.get("/history", params={"sec": 0}).status_code == 422
    assert client.get("/history", params={"sec": "abc"}).status_code == 422


def test_corr_default_vars(client, ticked):
    body = client.get("/corr").json()

    assert body["vars"] == ["co2", "no2", "nh3", "co"]
    assert body["sec"] == 1800
    assert len(body["corr"]) == 10
    assert body["corr"]["co2-co2"] == 1.0
    assert all(-1 <= r <= 1 for r in body["corr"].values())


def test_corr_unknown_var(client, ticked):
    body = client.get("/corr", params={"vars": "co2, bogus"}).json()
    assert body["corr"] == {"co2-co2": 1.0, "co2-bogus": 0.0, "bogus-bogus": 0.0}


def test_corr_requires_vars(client, service):
    assert client.get("/corr", params={"vars": " , "}).status_code == 400


def test_scatterbar_sampling(client, ticked):
    body = client.get("/scatterbar", params={"step": 10}).json()

    assert body["xVar"] == "temp"
    assert body["yVar"] == "rh"
    assert body["count"] == 3
    series = ticked.history.snapshot()
    assert [p["x"] for p in body["points"]] == [series[i].temp for i in (0, 10, 20)]


def test_scatterbar_spike(client, service):
    service.record(MeasurementSnapshot.capture({"co2": 1300, "no2": 30}))

    point = client.get("/scatterbar", params={"step": 1}).json()["points"][0]

    assert point["event"] == "spike"
    assert point["total"] == 1330.0
    assert point["x"] is None


def test_gaqi_breakdown(client, ticked):
    body = client.get("/gaqi-breakdown").json()

    assert set(body["components"]) == {"air_quality", "thermal_comfort", "gas_equilibrium", "volatility"}
    blended = sum(c["contribution"] for c in body["components"].values())
    assert body["indices"]["GAQI"] == pytest.approx(max(0.0, 100 - blended), abs=0.05)


def test_health(client, ticked):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["historyLen"] == 30
    assert body["historyCapacity"] == 100
