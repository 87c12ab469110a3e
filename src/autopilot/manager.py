# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

import contextlib
import logging
import threading

from autopilot.client import UpstreamClient
from autopilot.core import Flyzone
from autopilot.errors import (
    Error,
    InitializationError,
    NotReadyError,
    PlannerBusyError,
)
from autopilot.rrt import PathFinder

_module_logger = logging.getLogger(__name__)

ALIVE_MESSAGE = "Alive and well!"


class SharedPlanner(object):
    """
    Exclusive access to the one planner of the process.

    Parameters
    ----------
    planner : autopilot.rrt.PathFinder
        The planner to guard.
    timeout : float, optional
        How long `borrow_mut` waits for another holder to finish, in seconds.
        With the default of 0 a second borrower fails immediately.
    """
    _logger = _module_logger.getChild('SharedPlanner')

    def __init__(self, planner, timeout=0.0):
        self._planner = planner
        self._lock = threading.Lock()
        self.timeout = timeout

    @property
    def busy(self):
        return self._lock.locked()

    @contextlib.contextmanager
    def borrow_mut(self):
        """
        Yields the planner while holding its lock.

        Raises
        ------
        autopilot.errors.PlannerBusyError
            If the planner is still held by another caller after `timeout`.
        """
        if self.timeout > 0:
            acquired = self._lock.acquire(timeout=self.timeout)
        else:
            acquired = self._lock.acquire(blocking=False)
        if not acquired:
            self._logger.error("Planner is already borrowed; aborting the conflicting call.")
            raise PlannerBusyError("The planner is in use by another replan.")
        try:
            yield self._planner
        finally:
            self._lock.release()


class ReplanResult(object):
    """
    The outcome of one replan.

    Attributes
    ----------
    pose : autopilot.location.Pose
        The position the plan was made from.
    path : list of autopilot.location.GPSWaypoint or None
        The planned waypoints, or None if no feasible path exists.
    """
    def __init__(self, pose, path):
        self.pose = pose
        self.path = path

    @property
    def found(self):
        return self.path is not None

    def to_dict(self):
        return {
            "found": self.found,
            "pose": {"lat": self.pose.lat, "lon": self.pose.lon, "alt_msl": self.pose.alt_msl},
            "path": [
                {"lat": point.lat, "lon": point.lon, "alt_msl": point.elev} for point in self.path
            ] if self.found else None,
        }


class ReplanManager(object):
    """
    Owns the planner and mediates every interaction with it.

    The manager starts uninitialized. `initialize` loads the mission and the
    obstacles once and builds the planner; after that the manager is ready
    and `handle_replan` may be called from any number of threads.

    Attributes
    ----------
    telemetry_url : str
        Base address of the telemetry service.
    interop_url : str
        Base address of the interop proxy service.
    tolerance : float
        Positional tolerance given to the planner, in meters.
    """
    _logger = _module_logger.getChild('ReplanManager')

    def __init__(self, telemetry_url, interop_url, tolerance=1.0, client=None, planner_factory=PathFinder, lock_timeout=0.0):
        """
        Parameters
        ----------
        telemetry_url : str
        interop_url : str
        tolerance : float, optional
            Positional tolerance of the planner (default 1.0).
        client : autopilot.client.UpstreamClient, optional
            Client used for every fetch. One is created from the two URLs
            if not provided; `close` closes that one. A client passed in
            stays owned by the caller.
        planner_factory : callable, optional
            Called as ``planner_factory(tolerance, flyzones)`` to build the
            planner (default `autopilot.rrt.PathFinder`).
        lock_timeout : float, optional
            Passed to `SharedPlanner` (default 0).
        """
        self._telemetry_url = telemetry_url
        self._interop_url = interop_url
        self.tolerance = tolerance
        self._owns_client = client is None
        self.client = client if client is not None else UpstreamClient(telemetry_url, interop_url)
        self._planner_factory = planner_factory
        self._lock_timeout = lock_timeout
        self._flyzones = None
        self._planner = None

    @property
    def telemetry_url(self):
        return self._telemetry_url

    @property
    def interop_url(self):
        return self._interop_url

    @property
    def ready(self):
        return self._planner is not None

    @property
    def planner(self):
        """The `SharedPlanner`, or None before initialization."""
        return self._planner

    @property
    def flyzones(self):
        return self._flyzones

    def initialize(self):
        """
        Loads the mission and obstacles and builds the planner.

        Raises
        ------
        autopilot.errors.InitializationError
            If either fetch fails or the mission geometry is malformed. The
            manager stays uninitialized.
        """
        if self.ready:
            self._logger.warning("Already initialized; ignoring.")
            return

        self._logger.info("Getting flyzones...")
        try:
            mission = self.client.fetch_mission()
            flyzones = self._build_flyzones(mission)
            planner = self._planner_factory(self.tolerance, flyzones)
            if mission.waypoints:
                planner.set_waypoint_list([point.to_gps() for point in mission.waypoints])

            self._logger.info("Getting obstacles...")
            obstacles = self.client.fetch_obstacles()
            planner.set_obstacle_list(obstacles)
        except Error as e:
            self._logger.critical("Initialization failed: {}".format(e))
            if isinstance(e, InitializationError):
                raise
            raise InitializationError(str(e)) from e

        self._flyzones = flyzones
        self._planner = SharedPlanner(planner, timeout=self._lock_timeout)
        self._logger.info("Initialization complete ({} flyzones, {} obstacles).".format(len(flyzones), len(obstacles)))

    @staticmethod
    def _build_flyzones(mission):
        if not mission.fly_zones:
            raise InitializationError("The mission has no fly zones.")
        if not mission.fly_zones[0].boundary:
            raise InitializationError("The first fly zone has no boundary.")
        home = mission.fly_zones[0].boundary[0].to_gps()
        return [
            Flyzone(
                home,
                [point.to_gps() for point in zone.boundary],
                alt_msl_min=zone.alt_msl_min,
                alt_msl_max=zone.alt_msl_max,
            )
            for zone in mission.fly_zones
        ]

    def close(self):
        """Closes the upstream client, if the manager created it."""
        if self._owns_client:
            self.client.close()

    def handle_liveness(self):
        return ALIVE_MESSAGE

    def handle_replan(self):
        """
        Replans from the position reported by telemetry.

        The telemetry fetch happens before the planner is borrowed, so a slow
        telemetry service never holds the planner.

        Returns
        -------
        autopilot.manager.ReplanResult

        Raises
        ------
        autopilot.errors.NotReadyError
            If called before `initialize` succeeded.
        autopilot.errors.UpstreamError
            If telemetry cannot be fetched or decoded. The planner is not
            touched.
        autopilot.errors.PlannerBusyError
            If another replan holds the planner.
        """
        if not self.ready:
            raise NotReadyError("Replan requested before initialization completed.")

        telemetry = self.client.fetch_telemetry()
        pose = telemetry.pose

        with self._planner.borrow_mut() as planner:
            path = planner.adjust_path(pose)

        result = ReplanResult(pose, path)
        self._report(result)
        return result

    def _report(self, result):
        if not result.found:
            self._logger.warning("No path found from ({:.5f}, {:.5f}).".format(result.pose.lat, result.pose.lon))
            return
        self._logger.info("Path result ({} waypoints)".format(len(result.path)))
        for point in result.path:
            self._logger.info("{:.5f}, {:.5f}".format(point.lat, point.lon))
