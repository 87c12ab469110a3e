# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
The exceptions and errors of the autopilot package.
"""

class Error(Exception):
    pass

class UpstreamError(Error):
    """
    Base class for failures talking to the telemetry or interop services.

    Parameters
    ----------
    url : str
        The address that was being fetched.
    message : str
        A human readable description of the failure.
    """
    kind = 'upstream'

    def __init__(self, url, message):
        super(UpstreamError, self).__init__("{}: {}".format(url, message))
        self.url = url

class TransportError(UpstreamError):
    """
    This error is raised when an upstream service cannot be reached, times
    out, or answers with a non-success status.
    """
    kind = 'transport'

class DecodeError(UpstreamError):
    """
    This error is raised when an upstream response body does not match the
    expected schema.
    """
    kind = 'decode'

class NotReadyError(Error):
    """
    This error is raised when a replan is requested before the planner has
    been initialized.
    """
    kind = 'not_ready'

class PlannerBusyError(Error):
    """
    This error is raised when the planner is borrowed for mutation while
    another caller already holds it.
    """
    kind = 'busy'

class FlyzoneError(Error):
    """
    This error is raised when a flyzone boundary cannot form a polygon.
    """
    pass

class InitializationError(Error):
    """
    This error is raised when the mission or obstacles cannot be loaded at
    startup. The process must not serve requests after it.
    """
    pass
