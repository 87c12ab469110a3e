# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Blocking clients for the telemetry and interop proxy services.
"""

import logging

import httpx
from pydantic import ValidationError

from autopilot.errors import DecodeError, TransportError
from autopilot.messages import InteropMission, InteropTelem, Obstacles

_module_logger = logging.getLogger(__name__)

TELEMETRY_PATH = "/api/interop-telem"
MISSION_PATH = "/api/mission"
OBSTACLES_PATH = "/api/obstacles"


class UpstreamClient(object):
    """
    Fetches and decodes the mission, obstacles and telemetry.

    Every fetch is one request/response round trip and blocks the calling
    thread until the full body has been read or the timeout expires. There is
    no retry; failures are raised as `autopilot.errors.TransportError` or
    `autopilot.errors.DecodeError`.

    Parameters
    ----------
    telemetry_url : str
        Base address of the telemetry service, e.g. ``http://0.0.0.0:5000``.
    interop_url : str
        Base address of the interop proxy service.
    timeout : float, optional
        Timeout of each request in seconds (default 1).
    transport : httpx.BaseTransport, optional
        Transport used by the underlying client; tests pass an
        ``httpx.MockTransport``.
    """
    _logger = _module_logger.getChild('UpstreamClient')

    def __init__(self, telemetry_url, interop_url, timeout=1.0, transport=None):
        self.telemetry_url = telemetry_url.rstrip('/')
        self.interop_url = interop_url.rstrip('/')
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._client.close()

    def fetch(self, url, model):
        """
        Fetches `url` and decodes the body as `model`.

        Parameters
        ----------
        url : str
            The full address to GET.
        model : type of pydantic.BaseModel
            The schema the body must match.

        Returns
        -------
        pydantic.BaseModel
            An instance of `model`.

        Raises
        ------
        autopilot.errors.TransportError
            On connection failure, timeout, or a non-success status.
        autopilot.errors.DecodeError
            If the body is not valid JSON for `model`.
        """
        self._logger.debug("GET {}".format(url))
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportError(url, "timed out ({})".format(type(e).__name__)) from e
        except httpx.HTTPStatusError as e:
            raise TransportError(url, "status {}".format(e.response.status_code)) from e
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(url, "body does not match {}: {} error(s)".format(model.__name__, e.error_count())) from e

    def fetch_telemetry(self):
        """
        Returns
        -------
        autopilot.messages.InteropTelem
        """
        return self.fetch(self.telemetry_url + TELEMETRY_PATH, InteropTelem)

    def fetch_mission(self):
        """
        Returns
        -------
        autopilot.messages.InteropMission
        """
        return self.fetch(self.interop_url + MISSION_PATH, InteropMission)

    def fetch_obstacles(self):
        """
        Fetches the obstacles and keeps the stationary ones.

        Returns
        -------
        list of autopilot.location.Obstacle
        """
        obstacles = self.fetch(self.interop_url + OBSTACLES_PATH, Obstacles)
        return [obstacle.to_obstacle() for obstacle in obstacles.stationary]
