# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Autopilot
"""

import logging

from copy import copy
from logging import Formatter

MAPPING = {
    'DEBUG'   : 37, # white
    'INFO'    : 36, # cyan
    'WARNING' : 33, # yellow
    'ERROR'   : 31, # red
    'CRITICAL': 41, # white on red bg
}

PREFIX = '\033['
SUFFIX = '\033[0m'

class ColoredFormatter(Formatter):

    def __init__(self, patern):
        Formatter.__init__(self, patern)

    def format(self, record):
        colored_record = copy(record)
        levelname = colored_record.levelname
        seq = MAPPING.get(levelname, 37) # default white
        colored_levelname = ('{0}{1}m{2}{3}') \
            .format(PREFIX, seq, levelname, SUFFIX)
        colored_record.levelname = colored_levelname
        return Formatter.format(self, colored_record)

from autopilot.core import Flyzone
from autopilot.location import GPSWaypoint, Obstacle, Pose

# Set up logger
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
formatter = ColoredFormatter('[%(levelname)s] [%(asctime)s] %(name)s: %(message)s')
ch.setFormatter(formatter)
logger.addHandler(ch)


def set_log_level(level):
    """
    Sets the level of the package logger and its handler.

    Parameters
    ----------
    level : str or int
        A logging level name (e.g. ``'INFO'``) or number.
    """
    logger.setLevel(level)
    ch.setLevel(level)
