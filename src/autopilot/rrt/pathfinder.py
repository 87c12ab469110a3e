# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

import copy
import logging

import numpy as np

from autopilot.errors import FlyzoneError
from autopilot.location import GPSWaypoint, Waypoint, convert_point
from autopilot.tools import merge_polys
from .rrt_base import *


_module_logger = logging.getLogger(__name__)


class PathFinder(object):
    """
    Plans a straight-line path from the current position of the vehicle
    through the mission waypoints, staying inside the flyzones and clear of
    the obstacles.

    A PathFinder is stateful: every call to `adjust_path` replaces its search
    tree, its current position and its last path. Callers sharing one
    instance must serialize those calls.
    """
    _logger = _module_logger.getChild('PathFinder')

    def __init__(self, tolerance, flyzones, config=None):
        """
        Parameters
        ----------
        tolerance : float
            Positional tolerance, in meters. Segments are checked for
            collisions at this spacing.
        flyzones : list of autopilot.core.Flyzone
            The allowed regions. The home of the first flyzone is the origin
            of the local frame.
        config : autopilot.rrt.rrt_base.Config, optional
            Planner tuning. `resolution` is overridden by `tolerance`.
        """
        if not flyzones:
            raise FlyzoneError("At least one flyzone is required.")
        if tolerance <= 0:
            raise ValueError("Tolerance must be positive, got {}.".format(tolerance))

        self.config = copy.copy(config) if config else Config()
        self.config.resolution = float(tolerance)
        self.home = flyzones[0].home

        self._flyzones = tuple(flyzones)
        self._region = merge_polys([flyzone.boundary_poly for flyzone in flyzones])
        self._obstacles = []
        self._waypoints = []
        self._rng = np.random.default_rng(self.config.seed)

        self.tree = None
        self.current = None
        self.path = None
        self.adjustments = 0

    @property
    def tolerance(self):
        return self.config.resolution

    @property
    def flyzones(self):
        return self._flyzones

    @property
    def region(self):
        return self._region

    @property
    def obstacles(self):
        return list(self._obstacles)

    @property
    def waypoints(self):
        return list(self._waypoints)

    def set_obstacle_list(self, obstacles):
        """
        Replaces the obstacle list.

        Parameters
        ----------
        obstacles : list of autopilot.location.Obstacle
        """
        self._obstacles = [obstacle.ned_from(self.home) for obstacle in obstacles]
        self._logger.info("Obstacle list set ({} obstacles).".format(len(self._obstacles)))

    def set_waypoint_list(self, waypoints):
        """
        Replaces the waypoints the path must pass through, in order.

        Parameters
        ----------
        waypoints : list of autopilot.location.GPSWaypoint
        """
        self._waypoints = [convert_point(point.ned_from(self.home), Waypoint) for point in waypoints]
        self._logger.info("Waypoint list set ({} waypoints).".format(len(self._waypoints)))

    def adjust_path(self, plane):
        """
        Replans from the current position of the vehicle.

        Parameters
        ----------
        plane : autopilot.location.Pose
            The current position of the vehicle.

        Returns
        -------
        path : list of autopilot.location.GPSWaypoint or None
            The waypoints to fly, excluding the current position. An empty
            list means there is nothing left to fly. None means no feasible
            path exists from `plane`.
        """
        ned = plane.ned_from(self.home)
        yaw = getattr(plane, 'yaw', None)
        start = Waypoint(ned.n, ned.e, ned.d, np.radians(yaw) if yaw is not None else None)

        self.adjustments += 1
        self.current = start
        self.tree = None
        self.path = None

        if collision(start.ned, self._region, self._obstacles, self.config.clearance):
            self._logger.warning("Current position is out of bounds or on an obstacle.")
            return None

        full_path = []
        way1 = start
        for way2 in self.filter_invalid_waypoints(self._waypoints):
            leg = self.find_path(way1, way2)
            if leg is None:
                self._logger.warning("No path found to waypoint {}.".format(way2))
                return None
            full_path += leg
            way1 = full_path[-1]

        self.path = [GPSWaypoint.from_ned(point, self.home) for point in full_path]
        return list(self.path)

    def filter_invalid_waypoints(self, waypoints):
        """
        Removes all waypoints that are in obstacles or outside the flyzones.

        Parameters
        ----------
        waypoints : list of autopilot.location.Waypoint

        Returns
        -------
        waypoints : list of autopilot.location.Waypoint
        """
        valid = []
        for waypoint in waypoints:
            if collision(waypoint.ned, self._region, self._obstacles, self.config.clearance):
                self._logger.warning("Waypoint is out of bounds or on an obstacle: ignoring.")
            else:
                valid.append(waypoint)
        return valid

    def find_path(self, start, end):
        """
        Finds a path between two waypoints, accounting for obstacles and
        boundaries.

        Parameters
        ----------
        start : autopilot.location.Waypoint
            The starting waypoint.
        end : autopilot.location.Waypoint
            The ending waypoint.

        Returns
        -------
        path : list of autopilot.location.Waypoint or None
            The waypoints after `start` leading to `end`, or None if the
            sampling budget ran out before the tree reached `end`.
        """
        start_node = convert_point(start, Node)
        end_node = convert_point(end, Node)
        tree = Tree(root=start_node)
        self.tree = tree

        # check for if solution at the beginning
        chi = heading(start_node, end_node)
        if self.flyable_path(start_node, end_node, start_node.chi, chi):
            end_node.chi = chi
            return [convert_point(end_node, Waypoint)]

        for _ in range(self.config.max_attempts):
            if self.extend_tree(tree, end_node):
                path = self.smooth_path(find_minimum_path(tree))
                return [convert_point(node, Waypoint) for node in path[1:]]
        return None

    def flyable_path(self, start, end, chi0, chi1):
        """
        Checks if flying between two points is possible. It checks for
        collisions, chi angle, and incline.

        Parameters
        ----------
        start : autopilot.rrt.rrt_base.Node
            The starting node
        end : autopilot.rrt.rrt_base.Node
            The ending node
        chi0 : double
            The heading of the node being added to (in radians), or None.
        chi1 : double
            The heading of the added node (in radians).

        Returns
        -------
        boolean
            Returns True if a flyable path, False if not.
        """
        ned = points_along_straight(start, end, self.config.resolution)
        if collision(ned, self._region, self._obstacles, self.config.clearance):
            return False

        if chi0 is not None and start.distance(end, d2=True) > 0:
            dchi = delta_chi(wrap2pi(chi0), wrap2pi(chi1))
            if abs(dchi) > self.config.max_rel_chi:
                return False

        if abs(pitch(start, end)) > self.config.max_pitch:
            return False

        return True

    def extend_tree(self, tree, end):
        """
        Adds at most one leaf to the tree. This is the basic RRT algorithm.

        Parameters
        ----------
        tree : autopilot.rrt.rrt_base.Tree
        end : autopilot.rrt.rrt_base.Node
            The ending waypoint.

        Returns
        -------
        bool
            True if the tree now connects to `end`. Only a new leaf within
            `config.goal_radius` of `end` tries to connect to it.
        """
        minE, minN, maxE, maxN = self._region.bounds
        new_node = generate_random_node(maxN, minN, maxE, minE, self._rng)

        neighbors = tree.closest(new_node, self.config.neighborhood)
        costs = [node.cost + node.distance(new_node, d2=True) for node in neighbors]
        closest = neighbors[int(np.argmin(costs))]

        connection = new_node.ned[0,:2] - closest.ned[0,:2]
        length = np.linalg.norm(connection)
        if length == 0:
            return False
        L = min(length, self.config.max_distance)
        point = closest.ned[0,:2] + L*(connection / length)

        # climb or descend toward the goal altitude
        delta_h = L*np.tan(self.config.climb_pitch)
        if closest.h < end.h:
            h = min(closest.h + delta_h, end.h)
        else:
            h = max(closest.h - delta_h, end.h)

        new_node = Node(point.item(0), point.item(1), -h, 0.0, closest, False)
        new_node.chi = heading(closest, new_node)
        if not self.flyable_path(closest, new_node, closest.chi, new_node.chi):
            return False
        tree.add(new_node)

        if new_node.distance(end, d2=True) > self.config.goal_radius:
            return False
        chi = heading(new_node, end)
        if self.flyable_path(new_node, end, new_node.chi, chi):
            tree.add(Node(end.n, end.e, end.d, chi, new_node, True))
            return True
        return False

    def smooth_path(self, path):
        """
        Drops every node that can be skipped without a collision.
        """
        smoothed_path = [path[0]]
        for j in range(1, len(path) - 1):
            points = points_along_straight(smoothed_path[-1], path[j + 1], self.config.resolution)
            if collision(points, self._region, self._obstacles, self.config.clearance):
                smoothed_path.append(path[j])
        smoothed_path.append(path[-1])
        return smoothed_path
