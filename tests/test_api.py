import pytest
from fastapi.testclient import TestClient

from empire.api.routes import create_app
from empire.core.game import GameWorld


@pytest.fixture
def client():
    app = create_app(GameWorld(seed=5, speed=1.0))
    with TestClient(app) as c:
        yield c


def test_root_and_empire(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["clock_ms"] == 0

    r = client.get("/empire")
    assert r.status_code == 200
    data = r.json()
    assert [p["id"] for p in data["planets"]] == ["planet-1"]
    assert data["fleets"] == []


def test_planet_lookup_and_rename(client):
    assert client.get("/planets/planet-1").status_code == 200
    assert client.get("/planets/planet-9").status_code == 404

    r = client.patch("/planets/planet-1", json={"name": "Terra"})
    assert r.status_code == 200
    assert r.json()["value"]["name"] == "Terra"
    assert client.get("/planets/planet-1").json()["name"] == "Terra"

    r = client.patch("/planets/planet-1", json={"name": " "})
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "invalid_target"


def test_upgrade_preview_and_upgrade(client):
    r = client.get("/planets/planet-1/buildings/iron_mine")
    assert r.status_code == 200
    assert r.json()["cost"] == {"iron": 60, "kryptonite": 15}
    assert client.get("/planets/planet-1/buildings/moon_base").status_code == 404

    r = client.post("/planets/planet-1/buildings/iron_mine/upgrade")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["value"]["duration_s"] == 10

    r = client.post("/planets/planet-1/buildings/iron_mine/upgrade")
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "capacity"

    r = client.post("/simulation/advance", json={"elapsed_ms": 10000})
    assert r.status_code == 200
    assert r.json()["value"] == 10.0
    levels = {b["id"]: b["level"] for b in client.get("/planets/planet-1").json()["buildings"]}
    assert levels["iron_mine"] == 1


def test_rejections_carry_kind_and_missing(client):
    r = client.post("/planets/planet-1/buildings/solar_plant/upgrade")
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "prerequisite"
    assert "Spice Mine level 6" in detail["missing"]

    r = client.post("/research/energy_technology")
    assert r.status_code == 400
    assert r.json()["detail"]["missing"] == ["Research Laboratory level 1"]

    r = client.post("/planets/planet-1/units", json={"unit_type": "fighter"})
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "prerequisite"

    r = client.post("/planets/planet-1/defenses", json={"defense_type": "mortar", "count": 0})
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "invalid_target"

    assert client.post("/planets/planet-9/units", json={"unit_type": "fighter"}).status_code == 404


def test_fleet_routes(client):
    assert client.get("/fleets").json() == {"fleets": []}

    r = client.post("/fleets", json={
        "origin": "planet-1",
        "destination": "1:1:1",
        "mission": "transport",
        "units": {"small_transport": 1},
    })
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "affordability"
    assert r.json()["detail"]["shortfall"] == {"small_transport": 1}

    r = client.post("/fleets", json={
        "origin": "planet-1",
        "destination": "1:1:1",
        "mission": "transport",
        "units": {},
    })
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "invalid_target"


def test_simulation_speed(client):
    assert client.put("/simulation/speed", json={"multiplier": 0}).status_code == 400
    r = client.put("/simulation/speed", json={"multiplier": 4})
    assert r.status_code == 200
    assert r.json()["value"] == 4.0
    assert client.post("/simulation/advance", json={"elapsed_ms": 500}).json()["value"] == 2.0


def test_travel_endpoint(client):
    r = client.get("/travel", params={"origin": "1:1:1", "destination": "1:1:3"})
    assert r.status_code == 200
    assert r.json() == {"minutes": 2, "seconds": 0, "total": 120, "travel_type": "intra_system"}
    assert client.get("/travel", params={"origin": "1:1", "destination": "1:1:3"}).status_code == 400


def test_metrics_endpoint(client):
    client.get("/")
    client.post("/simulation/advance", json={"elapsed_ms": 1000})
    r = client.get("/metrics")
    assert r.status_code == 200
    snap = r.json()
    assert "http" in snap and "simulation" in snap
    assert snap["http"]["total_count"] >= 2
    assert snap["simulation"]["ticks"] >= 1
    assert isinstance(snap["http"]["by_route"], dict)


def test_universe_system_view(client):
    home = client.get("/planets/planet-1").json()["coordinates"]
    galaxy, system, _position = home.split(":")

    r = client.get(f"/universe/{galaxy}/{system}")
    assert r.status_code == 200
    slots = r.json()["slots"]
    assert len(slots) == 10
    distances = [s["sun_distance"] for s in slots]
    assert distances == sorted(distances)
    colonized = [s["coordinates"] for s in slots if s["is_colonized"]]
    assert colonized == [home]

    assert client.get("/universe/4/1").status_code == 404
    assert client.get("/universe/1/16").status_code == 404
