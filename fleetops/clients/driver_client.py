"""
Client for the driver service.

The assignment workflow only needs to know whether a CURP belongs to a
registered driver, so the lookup contract is a single ``exists`` call.
"""
import logging
from typing import Protocol
from urllib.parse import quote

import requests
from requests.exceptions import RequestException

from fleetops.config import settings
from fleetops.utils.exceptions import InternalServerException

logger = logging.getLogger(__name__)


class DriverLookup(Protocol):
    def exists(self, curp: str) -> bool: ...


class DriverClient:
    """HTTP lookup against ``GET {base_url}/driver/get/{curp}``."""

    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def exists(self, curp: str) -> bool:
        url = f"{self.base_url}/driver/get/{quote(curp, safe='')}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except RequestException as e:
            logger.warning(f"Driver lookup for {curp} failed: {e}")
            raise InternalServerException("Driver service unavailable") from e

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False

        logger.warning(f"Driver lookup for {curp} returned HTTP {response.status_code}")
        raise InternalServerException("Driver service unavailable")


class InMemoryDriverLookup:
    """Fixed set of known CURPs. Used for local runs and tests."""

    def __init__(self, curps=()):
        self.curps = set(curps)

    def exists(self, curp: str) -> bool:
        return curp in self.curps


_client: DriverClient | None = None


def get_driver_lookup() -> DriverLookup:
    """FastAPI dependency returning the process-wide driver client."""
    global _client
    if _client is None:
        _client = DriverClient(settings.DRIVER_SERVICE_URL, settings.DRIVER_SERVICE_TIMEOUT)
    return _client
