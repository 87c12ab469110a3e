# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
RRT Module
----------

The planning engine used by the replanning service. Only straight-line
segments are planned; the flight controller is left to smooth the turns.
"""

from .rrt_base import Config, Node, Tree, collision, heading, wrap2pi, delta_chi
from .pathfinder import PathFinder
