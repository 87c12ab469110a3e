# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Classes useful for specifying locations and objects in 3-space.
"""

import math

from geographiclib.geodesic import Geodesic
import numpy as np

class GPSWaypoint(object):
    def __init__(self, lat, lon, elev=0.0):
        """
        A data structure representing a GPS point.

        Parameters
        ----------
        lat : float
            The latitude of the point, expressed in decimal degrees (DD).
        lon : float
            The longitude of the point, expressed in decimal degrees (DD).
        elev : float, optional
            The elevation of the point above mean sea level, in meters
            (default 0).
        """
        self.lat = float(lat)
        self.lon = float(lon)
        self.elev = float(elev)

    def __repr__(self):
        return "{}({}, {}, {})".format(type(self).__name__, self.lat, self.lon, self.elev)

    def __eq__(self, other):
        return isinstance(other, GPSWaypoint) and \
            self.lat == other.lat and \
            self.lon == other.lon and \
            self.elev == other.elev

    def __ne__(self, other):
        return not self.__eq__(other)

    def ned_from(self, gps2):
        """
        Returns the NED position of the this GPS point relative to another
        GPS point.

        Parameters
        ----------
        gps2 : autopilot.location.GPSWaypoint
            The point to serve as a reference point. NED position is calculated
            relative to this point.

        Returns
        -------
        res : autopilot.location.NEDPoint
            The NED position of this point relative to gps2.

        >>> ref = GPSWaypoint(39.98304881111, -111.9903776, 0)
        >>> obstacle = GPSWaypoint(39.983258, -111.994228, 0)
        >>> obstacle.ned_from(ref).n
        23.234244610397234
        """
        inv = Geodesic.WGS84.Inverse(gps2.lat, gps2.lon, self.lat, self.lon)
        res = NEDPoint(
            n = inv["s12"] * math.cos(math.radians(inv["azi1"])),
            e = inv["s12"] * math.sin(math.radians(inv["azi1"])),
            d = float(-(self.elev - gps2.elev)),
        )
        return res

    @classmethod
    def from_ned(cls, point, ref):
        """
        Inverse of `ned_from`: the GPS location of a NED point expressed
        relative to `ref`.

        Parameters
        ----------
        point : autopilot.location.NEDPoint
        ref : autopilot.location.GPSWaypoint

        Returns
        -------
        gps : autopilot.location.GPSWaypoint
        """
        distance = math.hypot(point.n, point.e)
        azimuth = math.degrees(math.atan2(point.e, point.n))
        direct = Geodesic.WGS84.Direct(ref.lat, ref.lon, azimuth, distance)
        return cls(direct["lat2"], direct["lon2"], ref.elev - point.d)

class Pose(GPSWaypoint):
    """
    The current position of the vehicle, as reported by telemetry.

    Parameters
    ----------
    lat : float
        Latitude in decimal degrees.
    lon : float
        Longitude in decimal degrees.
    alt_msl : float
        Altitude above mean sea level, in meters.
    yaw : float, optional
        Heading in degrees, if the telemetry source provides one.
    """
    def __init__(self, lat, lon, alt_msl, yaw=None):
        super(Pose, self).__init__(lat, lon, alt_msl)
        self.yaw = yaw

    @property
    def alt_msl(self):
        return self.elev

class Obstacle(object):
    """
    A stationary cylindrical obstacle in geodetic coordinates.

    Parameters
    ----------
    center : autopilot.location.GPSWaypoint
        The center of the cylinder base.
    radius : float
        Radius of the cylinder, in meters.
    height : float
        Height of the cylinder above the ground, in meters.
    """
    def __init__(self, center, radius, height):
        self.center = center
        self.radius = float(radius)
        self.height = float(height)

    def __repr__(self):
        return "Obstacle({!r}, r={}, h={})".format(self.center, self.radius, self.height)

    def __eq__(self, other):
        return isinstance(other, Obstacle) and \
            self.center == other.center and \
            self.radius == other.radius and \
            self.height == other.height

    def __ne__(self, other):
        return not self.__eq__(other)

    def ned_from(self, ref):
        """
        Converts the obstacle to a `CircularObstacle` relative to `ref`.
        """
        center = self.center.ned_from(ref)
        return CircularObstacle(center.n, center.e, -self.height, self.radius)

class NEDPoint(object):
    """Represents a NED point.

    Parameters
    ----------
    n : float
        North coordinate relative to home (in meters).
    e : float
        East coordinate relative to home (in meters).
    d : float
        Down coordinate relative to home (in meters).
    """
    def __init__(self, n=0.0, e=0.0, d=0.0):
        self.ned = np.array([[float(n), float(e), float(d)]])

    def __repr__(self):
        return "{}({}, {}, {})".format(type(self).__name__, self.n, self.e, self.d)

    @property
    def n(self):
        return self.ned.item(0)

    @n.setter
    def n(self, value):
        self.ned[0,0] = float(value)

    @property
    def e(self):
        return self.ned.item(1)

    @e.setter
    def e(self, value):
        self.ned[0,1] = float(value)

    @property
    def d(self):
        return self.ned.item(2)

    @d.setter
    def d(self, value):
        self.ned[0,2] = float(value)

    @property
    def h(self):
        return -self.d

    @h.setter
    def h(self, value):
        self.d = -value

    def __eq__(self, other):
        return isinstance(other, self.__class__) and \
            np.allclose(self.ned, other.ned)

    def __ne__(self, other):
        return not self.__eq__(other)

    def distance(self, other, d2=False):
        """Euclidean distance to another point.

        Parameters
        ----------
        other : autopilot.location.NEDPoint
            Another NED point to find the Euclidean distance from.
        d2 : bool, optional
            Only measure the horizontal (north-east) distance (default False).

        Returns
        -------
        dist : float
            The distance from one NED point to another.
        """
        if d2:
            return np.linalg.norm(other.ned[0,:2] - self.ned[0,:2])
        return np.linalg.norm(other.ned - self.ned)

class BoundaryPoint(NEDPoint):
    """Represents a boundary point.

    Parameters
    ----------
    n : float
        North coordinate relative to home (in meters).
    e : float
        East coordinate relative to home (in meters).
    """
    def __init__(self, n=0.0, e=0.0):
        super(BoundaryPoint, self).__init__(n=n, e=e)

class Waypoint(NEDPoint):
    """Represents a point or a position.

    Parameters
    ----------
    n : float, optional
        North coordinate relative to home (in meters), default 0.
    e : float, optional
        East coordinate relative to home (in meters), default 0.
    d : float, optional
        Down coordinate relative to home (in meters), default 0.
    chi : float, optional
        Desired heading at this waypoint (in radians, (-pi, pi]), default 0.
    """
    def __init__(self, n=0.0, e=0.0, d=0.0, chi=0.0):
        super(Waypoint, self).__init__(n=n, e=e, d=d)
        self.chi = chi

class CircularObstacle(NEDPoint):
    """Represents a circular obstacle, defined by a coordinate, height, and
    radius.

    Parameters
    ----------
    n : float
        North coordinate relative to home (in meters).
    e : float
        East coordinate relative to home (in meters).
    d : float
        Down coordinate of the obstacle top relative to home (in meters).
    r : float
        Radius of obstacle (in meters).
    """
    def __init__(self, n=0.0, e=0.0, d=0.0, r=0.0):
        super(CircularObstacle, self).__init__(n=n, e=e, d=d)
        self._r = float(r)

    def __eq__(self, other):
        return super(CircularObstacle, self).__eq__(other) and \
            self.r == other.r

    def __ne__(self, other):
        return not self.__eq__(other)

    @property
    def r(self):
        return self._r

    @r.setter
    def r(self, value):
        self._r = float(value)

def convert_point(point, T):
    """
    Parameters
    ----------
    point : NEDPoint object (or one of its subclasses)
        The point to be converted.
    T : NEDPoint type (or one of its subclasses)
        The type to convert `point` to.
    """
    if not issubclass(T, NEDPoint):
        raise ValueError('Conversion to type {} is not supported.'.format(T))
    new = T()
    new.ned = point.ned.copy()
    for key in new.__dict__.keys() & point.__dict__.keys():
        if key != 'ned':
            new.__dict__[key] = point.__dict__[key]
    return new
