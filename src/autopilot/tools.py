# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

import numpy as np
import shapely
from shapely.geometry.polygon import Polygon
from shapely.ops import unary_union


def bounds2poly(boundaries):
    """
    Makes a Polygon object from a list of boundary points.

    Parameters
    ----------
    boundaries : list of autopilot.location.BoundaryPoint
        List of boundary points.

    Returns
    -------
    boundaries : shapely.geometry.polygon.Polygon
        Returns the Polygon representing the boundaries, with east as x and
        north as y.
    """
    return Polygon([[bound.e, bound.n] for bound in boundaries])


def gps2poly(points):
    """
    Makes a Polygon object from geodetic points, with longitude as x and
    latitude as y.

    Parameters
    ----------
    points : list of autopilot.location.GPSWaypoint
    """
    return Polygon([[point.lon, point.lat] for point in points])


def is_simple_area(poly):
    """
    True if `poly` does not cross itself and encloses some area.
    """
    return poly.is_valid and poly.area > 0


def merge_polys(polys):
    """
    Merges the polygons of several flyzones into one allowed region.

    Parameters
    ----------
    polys : list of shapely.geometry.polygon.Polygon

    Returns
    -------
    region : shapely.geometry.base.BaseGeometry
        A Polygon or MultiPolygon covering every input polygon.
    """
    return unary_union(polys)


def contains_ned(region, ned):
    """
    Checks which of a set of NED points lie inside a region.

    Parameters
    ----------
    region : shapely geometry
        The allowed region, as returned by `merge_polys`.
    ned : np.ndarray
        An m x 3 (or m x 2) array of north, east(, down) points.

    Returns
    -------
    inside : np.ndarray
        Boolean array of length m.
    """
    ned = np.atleast_2d(ned)
    return shapely.contains_xy(region, ned[:,1], ned[:,0])
