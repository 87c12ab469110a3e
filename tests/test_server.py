import httpx
import pytest
from fastapi.testclient import TestClient

from autopilot.manager import ReplanManager
from autopilot.server import create_application

from conftest import INTEROP_URL, TELEMETRY_URL, telemetry


@pytest.fixture
def manager(client):
    return ReplanManager(TELEMETRY_URL, INTEROP_URL, client=client)


@pytest.fixture
def api(manager):
    with TestClient(create_application(manager)) as test_client:
        yield test_client


class TestRoutes:
    def test_alive_before_initialize(self, api):
        response = api.get("/api/alive")
        assert response.status_code == 200
        assert response.text == "Alive and well!"

    def test_alive_after_initialize(self, api, manager):
        manager.initialize()
        response = api.get("/api/alive")
        assert response.status_code == 200
        assert response.text == "Alive and well!"

    def test_update_path_before_initialize(self, api):
        response = api.post("/api/update_path")
        assert response.status_code == 503
        assert response.json()["error"] == "not_ready"

    @pytest.mark.parametrize("method, path", [
        ("GET", "/"),
        ("GET", "/api/unknown"),
        ("GET", "/api/update_path"),
        ("POST", "/api/alive"),
        ("DELETE", "/api/update_path"),
    ])
    def test_unknown_is_not_found(self, api, method, path):
        assert api.request(method, path).status_code == 404


class TestUpdatePath:
    def test_path_found(self, api, manager):
        manager.initialize()
        response = api.post("/api/update_path")
        assert response.status_code == 200
        assert response.json() == {
            "found": True,
            "pose": {"lat": 5.0, "lon": 5.0, "alt_msl": 100.0},
            "path": [],
        }

    def test_out_of_zone_is_success_without_path(self, api, manager, upstream):
        manager.initialize()
        upstream.telem = telemetry(50, 50, 100)
        response = api.post("/api/update_path")
        assert response.status_code == 200
        assert response.json()["found"] is False
        assert response.json()["path"] is None

    def test_telemetry_unreachable(self, api, manager, upstream):
        manager.initialize()
        upstream.failures["/api/interop-telem"] = httpx.ConnectError("refused")
        response = api.post("/api/update_path")
        assert response.status_code == 502
        assert response.json()["error"] == "transport"

    def test_telemetry_malformed(self, api, manager, upstream):
        manager.initialize()
        upstream.telem = {"pos": "somewhere"}
        response = api.post("/api/update_path")
        assert response.status_code == 502
        assert response.json()["error"] == "decode"

    def test_busy_planner(self, api, manager):
        manager.initialize()
        with manager.planner.borrow_mut():
            response = api.post("/api/update_path")
            assert response.status_code == 409
            assert response.json()["error"] == "busy"
            assert api.get("/api/alive").status_code == 200
        assert api.post("/api/update_path").status_code == 200

    def test_server_keeps_serving_after_failures(self, api, manager, upstream):
        manager.initialize()
        upstream.failures["/api/interop-telem"] = 500
        assert api.post("/api/update_path").status_code == 502
        del upstream.failures["/api/interop-telem"]
        assert api.post("/api/update_path").status_code == 200
