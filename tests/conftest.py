import json

import httpx
import pytest

from autopilot.client import UpstreamClient
from autopilot.location import GPSWaypoint, NEDPoint

TELEMETRY_URL = "http://telemetry.test"
INTEROP_URL = "http://interop.test"

# Reference point used by the small planner scenarios (meters from here).
HOME = GPSWaypoint(40.267052, -111.636455, 0)


def gps(n, e, elev=0.0):
    """The GPS location `n` meters north and `e` meters east of HOME."""
    return GPSWaypoint.from_ned(NEDPoint(n, e, -elev), HOME)


def latlon(point):
    return {"lat": point.lat, "lon": point.lon}


def square_mission(size=400.0, waypoints=()):
    """A mission with one square flyzone starting at HOME."""
    corners = [gps(0, 0), gps(size, 0), gps(size, size), gps(0, size)]
    return {
        "id": 1,
        "active": True,
        "fly_zones": [{
            "alt_msl_min": 0.0,
            "alt_msl_max": 300.0,
            "boundary": [latlon(p) for p in corners],
        }],
        "waypoints": [dict(latlon(p), alt_msl=p.elev) for p in waypoints],
    }


def telemetry(lat, lon, alt_msl, yaw=None):
    body = {"time": 0.0, "pos": {"lat": lat, "lon": lon, "alt_msl": alt_msl}}
    if yaw is not None:
        body["yaw"] = yaw
    return body


class FakeUpstream(object):
    """
    Stands in for the telemetry and interop proxy services.

    Set `mission`, `obstacles` and `telem` to the JSON bodies to serve. Set an
    entry of `failures` (keyed by path) to an exception to raise, or to an int
    status code to answer with.
    """

    def __init__(self):
        self.mission = {
            "fly_zones": [{
                "boundary": [
                    {"lat": 0, "lon": 0},
                    {"lat": 0, "lon": 10},
                    {"lat": 10, "lon": 10},
                    {"lat": 10, "lon": 0},
                ],
            }],
        }
        self.obstacles = {"stationary": [], "moving": []}
        self.telem = telemetry(5, 5, 100)
        self.failures = {}
        self.requests = []

    def __call__(self, request):
        path = request.url.path
        self.requests.append((request.url.host, path))
        failure = self.failures.get(path)
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, int):
            return httpx.Response(failure, text="nope")
        if isinstance(failure, str):
            return httpx.Response(200, text=failure)

        if request.url.host == "telemetry.test" and path == "/api/interop-telem":
            return httpx.Response(200, content=json.dumps(self.telem))
        if request.url.host == "interop.test" and path == "/api/mission":
            return httpx.Response(200, content=json.dumps(self.mission))
        if request.url.host == "interop.test" and path == "/api/obstacles":
            return httpx.Response(200, content=json.dumps(self.obstacles))
        return httpx.Response(404)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(upstream):
    with UpstreamClient(TELEMETRY_URL, INTEROP_URL, transport=httpx.MockTransport(upstream)) as c:
        yield c
