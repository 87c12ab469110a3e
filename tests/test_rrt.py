import time

import pytest

import numpy as np

from autopilot.core import Flyzone
from autopilot.errors import FlyzoneError
from autopilot.location import GPSWaypoint, Obstacle, Pose, Waypoint
from autopilot.rrt import Config, Node, PathFinder, Tree, collision, delta_chi, heading, wrap2pi
from autopilot.rrt.rrt_base import find_minimum_path, points_along_straight

from conftest import HOME, gps


def square_flyzone(size=400.0):
    return Flyzone(HOME, [gps(0, 0), gps(size, 0), gps(size, size), gps(0, size)])


def pose(n, e, alt, yaw=None):
    point = gps(n, e, alt)
    return Pose(point.lat, point.lon, point.elev, yaw=yaw)


def test_heading():
    assert np.degrees(heading(Waypoint(1,1,0), Waypoint(2,2,0))) == pytest.approx(45.0)
    assert np.degrees(heading(Waypoint(1,1,0), Waypoint(0,0,0))) == pytest.approx(-135.0)
    assert np.degrees(heading(Waypoint(1,1,0), Waypoint(2,0,0))) == pytest.approx(-45.0)
    assert np.degrees(heading(Waypoint(1,1,0), Waypoint(2,1,0))) == 0.0

def test_wrap2pi():
    assert wrap2pi(np.radians(-180)) == pytest.approx(3.141592653589793)
    assert wrap2pi(np.radians(180)) == pytest.approx(3.141592653589793)
    assert wrap2pi(np.radians(-179)) == pytest.approx(-3.12413936106985)
    assert wrap2pi(np.radians(380)) == pytest.approx(0.3490658503988664)

def test_delta_chi():
    assert np.degrees(delta_chi(np.radians(345), np.radians(185))) == pytest.approx(-160.0)
    assert np.degrees(delta_chi(np.radians(-15), np.radians(90))) == pytest.approx(105.0)

def test_points_along_straight_spacing():
    ned = points_along_straight(Waypoint(0, 0, 0), Waypoint(10, 0, -10), 1.0)
    steps = np.linalg.norm(np.diff(ned, axis=0), axis=1)
    assert ned.shape[1] == 3
    assert np.all(steps <= 1.0)
    assert list(ned[0]) == [0, 0, 0]
    assert list(ned[-1]) == [10, 0, -10]

def test_tree_closest_skips_goal_nodes():
    root = Node(0, 0, 0)
    tree = Tree(root)
    tree.add(Node(1, 1, 0, parent=root, connects=True))
    tree.add(Node(5, 5, 0, parent=root))
    assert tree.closest(Node(1, 1, 0)) == [root]
    with pytest.raises(TypeError):
        tree.add(Waypoint(0, 0, 0))

def test_node_cost_follows_parents():
    root = Node(0, 0, 0)
    a = Node(3, 4, 0, parent=root)
    b = Node(3, 10, -50, parent=a)
    assert b.cost == pytest.approx(11.0)

def test_node_cost_on_deep_branch():
    node = Node(0, 0, 0)
    for i in range(1, 3001):
        node = Node(i, 0, 0, parent=node)
    assert node.cost == pytest.approx(3000.0)
    assert len(find_minimum_path(Tree(Node(3000, 0, 0, parent=node, connects=True)))) == 3002


class TestCollision:
    def setup_method(self):
        self.pathfinder = PathFinder(1.0, [square_flyzone()])
        self.pathfinder.set_obstacle_list([Obstacle(gps(200, 200), radius=30, height=100)])
        self.obstacles = self.pathfinder._obstacles

    def test_clear_segment(self):
        ned = points_along_straight(Waypoint(50, 50, -50), Waypoint(50, 350, -50), 1.0)
        assert not collision(ned, self.pathfinder.region, self.obstacles, 5.0)

    def test_through_obstacle(self):
        ned = points_along_straight(Waypoint(50, 50, -50), Waypoint(350, 350, -50), 1.0)
        assert collision(ned, self.pathfinder.region, self.obstacles, 5.0)

    def test_above_obstacle(self):
        ned = points_along_straight(Waypoint(50, 50, -150), Waypoint(350, 350, -150), 1.0)
        assert not collision(ned, self.pathfinder.region, self.obstacles, 5.0)

    def test_out_of_bounds(self):
        ned = points_along_straight(Waypoint(50, 50, -50), Waypoint(50, 450, -50), 1.0)
        assert collision(ned, self.pathfinder.region, self.obstacles, 5.0)

    def test_none(self):
        assert collision(None, self.pathfinder.region, self.obstacles)


class TestPathFinder:
    def test_requires_flyzones(self):
        with pytest.raises(FlyzoneError):
            PathFinder(1.0, [])

    def test_requires_positive_tolerance(self):
        with pytest.raises(ValueError):
            PathFinder(0.0, [square_flyzone()])

    def test_tolerance_sets_resolution(self):
        config = Config(resolution=9.0)
        pathfinder = PathFinder(2.0, [square_flyzone()], config)
        assert pathfinder.tolerance == 2.0
        assert config.resolution == 9.0

    def test_nothing_to_fly(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        assert pathfinder.adjust_path(pose(100, 100, 50)) == []
        assert pathfinder.adjustments == 1
        assert pathfinder.current.n == pytest.approx(100.0)
        assert pathfinder.current.e == pytest.approx(100.0)
        assert pathfinder.current.h == pytest.approx(50.0)

    def test_out_of_zone_is_no_path(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        pathfinder.set_waypoint_list([gps(300, 300, 50)])
        assert pathfinder.adjust_path(pose(500, 500, 50)) is None
        assert pathfinder.path is None
        assert pathfinder.adjustments == 1

    def test_inside_obstacle_is_no_path(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        pathfinder.set_obstacle_list([Obstacle(gps(200, 200), radius=30, height=100)])
        assert pathfinder.adjust_path(pose(200, 210, 50)) is None

    def test_direct_path(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        target = gps(350, 350, 50)
        pathfinder.set_waypoint_list([target])
        path = pathfinder.adjust_path(pose(50, 50, 50))
        assert len(path) == 1
        assert path[0].lat == pytest.approx(target.lat, abs=1e-8)
        assert path[0].lon == pytest.approx(target.lon, abs=1e-8)
        assert path[0].elev == pytest.approx(50.0)
        assert pathfinder.path == path

    def test_path_through_several_waypoints(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        targets = [gps(50, 350, 50), gps(350, 350, 50), gps(350, 50, 50)]
        pathfinder.set_waypoint_list(targets)
        path = pathfinder.adjust_path(pose(50, 50, 50))
        assert len(path) == 3
        for point, target in zip(path, targets):
            assert point.lat == pytest.approx(target.lat, abs=1e-8)
            assert point.lon == pytest.approx(target.lon, abs=1e-8)

    def test_avoids_obstacle(self):
        pathfinder = PathFinder(1.0, [square_flyzone()], Config(seed=1111, max_attempts=5000))
        pathfinder.set_obstacle_list([Obstacle(gps(200, 200), radius=40, height=100)])
        target = gps(350, 350, 50)
        pathfinder.set_waypoint_list([target])

        path = pathfinder.adjust_path(pose(50, 50, 50))
        assert path is not None
        assert len(path) >= 2
        assert path[-1].lat == pytest.approx(target.lat, abs=1e-8)
        assert path[-1].lon == pytest.approx(target.lon, abs=1e-8)

        ned = [pathfinder.current] + [p.ned_from(pathfinder.home) for p in path]
        for start, end in zip(ned[:-1], ned[1:]):
            points = points_along_straight(start, end, pathfinder.tolerance)
            assert not collision(points, pathfinder.region, pathfinder._obstacles, pathfinder.config.clearance - 0.01)

    def test_invalid_waypoints_are_skipped(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        pathfinder.set_obstacle_list([Obstacle(gps(200, 200), radius=30, height=100)])
        pathfinder.set_waypoint_list([gps(200, 200, 50), gps(100, 300, 50), gps(900, 900, 50)])
        path = pathfinder.adjust_path(pose(100, 100, 50))
        assert len(path) == 1
        assert path[0].lat == pytest.approx(gps(100, 300).lat, abs=1e-8)

    def test_unreachable_waypoint_is_no_path(self):
        # two flyzones that do not touch
        west = Flyzone(HOME, [gps(0, 0), gps(100, 0), gps(100, 100), gps(0, 100)])
        east = Flyzone(HOME, [gps(0, 300), gps(100, 300), gps(100, 400), gps(0, 400)])
        pathfinder = PathFinder(1.0, [west, east], Config(seed=3, max_attempts=50))
        pathfinder.set_waypoint_list([gps(50, 350, 50)])
        assert pathfinder.adjust_path(pose(50, 50, 50)) is None

    def test_each_call_replaces_state(self):
        pathfinder = PathFinder(1.0, [square_flyzone()])
        pathfinder.set_waypoint_list([gps(350, 350, 50)])
        pathfinder.adjust_path(pose(50, 50, 50))
        pathfinder.adjust_path(pose(60, 60, 50))
        assert pathfinder.adjustments == 2
        assert pathfinder.current.n == pytest.approx(60.0)

    def test_unreachable_leg_over_wide_zones(self):
        # one degree square zones, a degree apart
        def zone(lat, lon):
            return [GPSWaypoint(lat, lon), GPSWaypoint(lat + 1, lon), GPSWaypoint(lat + 1, lon + 1), GPSWaypoint(lat, lon + 1)]
        west = zone(40.0, -113.0)
        flyzones = [Flyzone(west[0], west), Flyzone(west[0], zone(40.0, -111.0))]
        pathfinder = PathFinder(1.0, flyzones, Config(seed=7))
        pathfinder.set_waypoint_list([GPSWaypoint(40.5, -110.5, 100)])

        started = time.perf_counter()
        assert pathfinder.adjust_path(Pose(40.5, -112.5, 100)) is None
        assert time.perf_counter() - started < 30.0
        assert len(pathfinder.tree) > 1
        assert all(not node.connects for node in pathfinder.tree)

    def test_far_leaves_skip_goal(self):
        pathfinder = PathFinder(1.0, [square_flyzone()], Config(seed=1111, max_attempts=300, goal_radius=0.0))
        pathfinder.set_obstacle_list([Obstacle(gps(200, 200), radius=40, height=100)])
        pathfinder.set_waypoint_list([gps(350, 350, 50)])
        assert pathfinder.adjust_path(pose(50, 50, 50)) is None
