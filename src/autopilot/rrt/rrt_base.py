# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

import logging

import numpy as np

from autopilot.location import Waypoint
from autopilot.tools import contains_ned


_module_logger = logging.getLogger(__name__)

class Config(object):
    clearance = 5.0
    max_distance = 50.0
    max_rel_chi = 15*np.pi/16
    max_pitch = np.radians(25)
    climb_pitch = np.radians(20)
    max_attempts = 2000
    resolution = 1.0
    neighborhood = 100.0
    goal_radius = 1000.0
    seed = None

    def __init__(self, clearance=clearance, max_distance=max_distance, max_rel_chi=max_rel_chi, max_pitch=max_pitch, climb_pitch=climb_pitch, max_attempts=max_attempts, resolution=resolution, neighborhood=neighborhood, goal_radius=goal_radius, seed=seed):
        """
        Parameters
        ----------
        clearance : float, optional
            The minimum distance between the path and all obstacles (default 5.0).
        max_distance : float, optional
            Max distance between each added leaf (default 50.0).
        max_rel_chi : float, optional
            The maximum difference in the chi angles of path segments/leaves (default 15*pi/16).
        max_pitch : float, optional
            Steepest climb or descent allowed on a segment, in radians (default 25 degrees).
        climb_pitch : float, optional
            Pitch used when new leaves climb or descend toward the goal altitude (default 20 degrees).
        max_attempts : int, optional
            How many random samples a single leg may draw before the leg is
            declared infeasible (default 2000).
        resolution : float, optional
            The spacing of points along the path that are checked for collisions, in meters (default 1.0).
        neighborhood : float, optional
            Radius within which existing leaves are considered as parents for a new leaf (default 100).
        goal_radius : float, optional
            Only leaves at most this far from the goal, horizontally, try to
            connect to it (default 1000).
        seed : int, optional
            Seed for the random sampler, for reproducible plans (default None).
        """
        self.clearance = clearance
        self.max_distance = max_distance
        self.max_rel_chi = max_rel_chi
        self.max_pitch = max_pitch
        self.climb_pitch = climb_pitch
        self.max_attempts = max_attempts
        self.resolution = resolution
        self.neighborhood = neighborhood
        self.goal_radius = goal_radius
        self.seed = seed


class Tree(object):
    _logger = _module_logger.getChild('Tree')

    def __init__(self, root=None):
        """
        Creates a tree object and sets root as the root node.

        Parameters
        ----------
        root : autopilot.rrt.rrt_base.Node
            The root Node of the tree.
        """
        super(Tree, self).__init__()
        self.nodes = []
        self._ne = []
        self._open = []
        if root is not None:
            self.add(root)

    def __getitem__(self, index):
        return self.nodes[index]

    def __len__(self):
        return len(self.nodes)

    def closest(self, node, distance=None):
        """
        Finds the nodes in the tree closest to some other node.

        Parameters
        ----------
        node : autopilot.location.NEDPoint
            A random node we're trying to find the nearest neighbor of.
        distance : float
            Finds all neighbors within some distance from the node. If None,
            or if no node is that close, returns the single closest node
            (default None).

        Returns
        -------
        list of autopilot.rrt.rrt_base.Node
            The nodes already stored in the tree that are closest to the
            passed in node.
        """
        idx = np.flatnonzero(self._open)
        dists = np.linalg.norm(np.asarray(self._ne)[idx] - node.ned[0,:2], axis=1)
        if distance:
            near = idx[dists <= distance]
            if len(near) != 0:
                return [self.nodes[i] for i in near]
        return [self.nodes[idx[np.argmin(dists)]]]

    def add(self, node):
        if type(node) is not Node:
            raise TypeError('Tree can only hold Node types')
        self.nodes.append(node)
        self._ne.append(node.ned[0,:2].copy())
        # nodes that reach the goal are never extended
        self._open.append(not node.connects)


class Node(Waypoint):
    _logger = _module_logger.getChild('Node')

    def __init__(self, n=0.0, e=0.0, d=0.0, chi=0.0, parent=None, connects=False):
        """
        Parameters
        ----------
        n, e, d : float, optional
            Position of the node relative to home (default 0).
        chi : float, optional
            Heading in radians (default 0). None when the heading is unknown.
        parent : reference to autopilot.rrt.rrt_base.Node, optional
            A reference to the parent node of the object (default None).
        connects : bool, optional
            Whether or not this node connects to the goal; true if it connects,
            false otherwise (default False).
        """
        super(Node, self).__init__(n, e, d, chi)
        self.parent = parent
        self.connects = connects
        # horizontal length of the branch from the root to this node
        self.cost = parent.cost + self.distance(parent, d2=True) if parent is not None else 0.0


def find_minimum_path(tree):
    """
    Walks back from the cheapest node that connects to the goal.

    Returns
    -------
    path : list of autopilot.rrt.rrt_base.Node
        Nodes ordered from the root of the tree to the goal.
    """
    viable = [node for node in tree if node.connects]
    costs = [node.cost for node in viable]
    idx = np.argmin(costs)
    path = [viable[idx]]
    while path[-1].parent is not None:
        path.append(path[-1].parent)
    return path[::-1]

def generate_random_node(nmax, nmin, emax, emin, rng):
    """
    Creates a random point in the 2D plane bounded by the max and min
    boundary positions.

    Parameters
    ----------
    nmax, nmin : float
        The northernmost and southernmost boundary (in meters).
    emax, emin : float
        The easternmost and westernmost boundary (in meters).
    rng : numpy.random.Generator

    Returns
    -------
    rand : autopilot.rrt.rrt_base.Node
        A Node within the region bounded by the parameters (altitude is at
        ground level).
    """
    return Node(n=rng.uniform(low=nmin, high=nmax), e=rng.uniform(low=emin, high=emax))

def points_along_straight(start, end, res):
    """
    Creates a stepped range of values from the starting node to the ending node
    with difference in step size guaranteed to be less than `res`.

    Parameters
    ----------
    start : autopilot.location.NEDPoint
        The starting node to create a range from.
    end : autopilot.location.NEDPoint
        The ending node to create a range to.
    res : float
        Maximum spacing between the returned points.

    Returns
    -------
    ned : np.ndarray
        An m x 3 numpy array, where each row is an array of north, east,
        down points.
    """
    q0 = end.ned - start.ned
    points = int(np.ceil(np.linalg.norm(q0)/res)) + 1
    n = np.linspace(start.n, end.n, num=points)
    e = np.linspace(start.e, end.e, num=points)
    d = np.linspace(start.d, end.d, num=points)
    return np.stack([n, e, d], axis=1)

def collision(ned, region, obstacles, clearance=Config.clearance):
    """
    Parameters
    ----------
    ned : np.ndarray
        An n x 3 matrix of north, east, down points. Each row corresponds
        to one coordinate point.
    region : shapely geometry
        The union of all flyzone polygons.
    obstacles : list of autopilot.location.CircularObstacle
        The obstacles in the mission.
    clearance : float, optional
        Distance to keep from the side and top of each obstacle.

    Returns
    -------
    collides : bool
        True if the points collide with an obstacle or leave the flyzones;
        False otherwise.
    """
    _logger = _module_logger.getChild('collision')
    if ned is None:
        _logger.warning("'ned' is None")
        return True
    ned = np.atleast_2d(ned)

    for obstacle in obstacles:
        # first check if the path is entirely above the obstacle
        if np.all(-ned[:,2] > obstacle.h + clearance):
            continue
        dist = np.linalg.norm(ned[:,:2] - obstacle.ned[:,:2], axis=1)
        if np.any(dist < obstacle.r + clearance):
            _logger.debug('Points run through obstacle')
            return True

    if not np.all(contains_ned(region, ned)):
        _logger.debug('Points are out of bounds')
        return True
    return False

def heading(p0, p1):
    """
    Computes the navigational heading from the first waypoint to the second.

    Returns
    -------
    chi : float
        The heading from the origin to the destination waypoints (in radians)
        on the interval (-pi, pi].

    Examples
    --------
    >>> np.degrees(heading(Waypoint(0,0), Waypoint(10, 0)))
    0.0
    >>> np.degrees(heading(Waypoint(0,0), Waypoint(0, 10)))
    90.0
    """
    return np.arctan2((p1.e - p0.e), (p1.n - p0.n))

def pitch(p1, p2):
    """
    Calculates the pitch angle travelling from the first waypoint to the second.
    """
    return np.arctan2((p2.h - p1.h), p2.distance(p1, d2=True))

def wrap2pi(rad):
    """
    Wraps an angle in radians onto an interval from (-pi, pi].

    Examples
    --------
    >>> wrap2pi(np.radians(-180))
    3.141592653589793
    >>> wrap2pi(np.radians(380))
    0.3490658503988664
    """
    # Map angle (in radians) onto an interval from [0, 2*pi).
    wrap = np.mod(rad, 2*np.pi)
    # If angle > pi, wrap around to be on an interval from (-pi, pi].
    if np.abs(wrap) > np.pi:
        wrap -= 2*np.pi*np.sign(wrap)
    return wrap

def delta_chi(chi0, chi1):
    """
    Calculates the change in heading from chi0 to chi1.

    The sign of the result indicates whether the quickest turn to get to
    the desired heading is a left or a right turn.

    Examples
    --------
    >>> np.degrees(delta_chi(np.radians(345), np.radians(185)))
    -160.0
    >>> np.degrees(delta_chi(np.radians(-15), np.radians(90)))
    105.0
    """
    return wrap2pi(chi1-chi0)
