# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Useful core classes that don't belong in any specific package.
"""

import logging

from shapely.errors import ShapelyError

from autopilot.errors import FlyzoneError
from autopilot.location import BoundaryPoint
from autopilot.tools import bounds2poly, gps2poly, is_simple_area


_module_logger = logging.getLogger(__name__)


class Flyzone(object):
    """
    A polygon the vehicle is allowed to fly inside.
    """
    _logger = _module_logger.getChild('Flyzone')

    def __init__(self, home, boundary, alt_msl_min=None, alt_msl_max=None):
        """Initializes the Flyzone object.

        The geodetic boundary is projected into a North-East-Down frame
        centered on `home`. Point order, and therefore winding, is kept.

        Parameters
        ----------
        home : autopilot.location.GPSWaypoint
            The origin of the local NED frame.
        boundary : list of autopilot.location.GPSWaypoint
            Points that, in the order they are provided, trace out the
            perimeter of the flyzone.
        alt_msl_min : float, optional
            Lowest allowed altitude in meters MSL, when the mission sets one.
        alt_msl_max : float, optional
            Highest allowed altitude in meters MSL, when the mission sets one.

        Raises
        ------
        autopilot.errors.FlyzoneError
            If the boundary has fewer than 3 points, crosses itself, or
            encloses no area.
        """
        if len(boundary) < 3:
            raise FlyzoneError("A flyzone needs at least 3 boundary points, got {}.".format(len(boundary)))
        self.home = home
        self.alt_msl_min = alt_msl_min
        self.alt_msl_max = alt_msl_max
        self._gps_boundary = tuple(boundary)
        self._boundary_list = tuple(
            BoundaryPoint(ned.n, ned.e) for ned in (point.ned_from(home) for point in boundary)
        )
        try:
            outline = gps2poly(boundary)
            self._boundary_poly = bounds2poly(self._boundary_list)
        except (ValueError, ShapelyError) as e:
            raise FlyzoneError("Flyzone boundary is not a polygon: {}".format(e)) from e
        if not is_simple_area(outline) or not is_simple_area(self._boundary_poly):
            raise FlyzoneError("Flyzone boundary must be a simple polygon with nonzero area.")

    def __len__(self):
        return len(self._boundary_list)

    def __repr__(self):
        return "Flyzone({} points)".format(len(self))

    @property
    def gps_boundary(self):
        return self._gps_boundary

    @property
    def boundary_list(self):
        return self._boundary_list

    @property
    def boundary_poly(self):
        return self._boundary_poly
