# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Python representations of the messages served by the telemetry and interop
services.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from autopilot.location import GPSWaypoint, Obstacle, Pose


class Position(BaseModel):
    """A latitude/longitude pair in decimal degrees."""
    lat: float
    lon: float

    def to_gps(self, elev=0.0):
        return GPSWaypoint(self.lat, self.lon, elev)


class AerialPosition(Position):
    """A position with an altitude above mean sea level, in meters."""
    alt_msl: float

    def to_gps(self):
        return GPSWaypoint(self.lat, self.lon, self.alt_msl)


class InteropTelem(BaseModel):
    """Telemetry as served by the telemetry service."""
    time: Optional[float] = None
    pos: AerialPosition
    yaw: Optional[float] = None

    @property
    def pose(self):
        return Pose(self.pos.lat, self.pos.lon, self.pos.alt_msl, yaw=self.yaw)


class FlyZone(BaseModel):
    alt_msl_min: Optional[float] = None
    alt_msl_max: Optional[float] = None
    boundary: List[Position]


class InteropMission(BaseModel):
    """The active mission, as forwarded by the interop proxy."""
    id: Optional[int] = None
    active: Optional[bool] = None
    fly_zones: List[FlyZone]
    waypoints: List[AerialPosition] = Field(default_factory=list)


class StationaryObstacle(BaseModel):
    pos: Position
    radius: float
    height: float

    def to_obstacle(self):
        return Obstacle(self.pos.to_gps(), self.radius, self.height)


class MovingObstacle(BaseModel):
    pos: AerialPosition
    radius: float


class Obstacles(BaseModel):
    """The obstacle list, as forwarded by the interop proxy."""
    stationary: List[StationaryObstacle] = Field(default_factory=list)
    moving: List[MovingObstacle] = Field(default_factory=list)
