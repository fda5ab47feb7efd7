"""HTTP health probing of deployed workers"""

import logging
from typing import Dict, Iterable, Optional

import httpx

from ..api.exceptions import HealthCheckError
from ..constants import DEFAULT_HEALTH_PATH, DEFAULT_HEALTH_TIMEOUT
from ..models.result import HealthReport
from ..utils.async_utils import gather_all

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "?"


class HealthChecker:
    """Reads the version a worker reports on its health endpoint

    ``probe`` and ``probe_many`` are best-effort and never raise; the
    ``fetch_*`` methods raise HealthCheckError on any failure.
    """

    def __init__(self,
                 health_path: str = DEFAULT_HEALTH_PATH,
                 timeout: float = DEFAULT_HEALTH_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize health checker

        Args:
            health_path: Path of the health endpoint
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.health_path = health_path if health_path.startswith("/") else f"/{health_path}"
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True
        )

    def health_url(self, url: str) -> str:
        return url.rstrip("/") + self.health_path

    async def probe(self, url: str, client: Optional[httpx.AsyncClient] = None) -> Optional[str]:
        """
        Best-effort health probe

        Args:
            url: Base URL of the worker
            client: Shared client, created per call when omitted

        Returns:
            Reported version, or None on network error, timeout, non-2xx,
            invalid JSON or a missing version field
        """
        if client is None:
            async with self._client() as own_client:
                return await self.probe(url, own_client)

        target = self.health_url(url)
        try:
            response = await client.get(target)
        except httpx.HTTPError as e:
            logger.debug(f"Health probe {target} failed: {e}")
            return None

        if not response.is_success:
            logger.debug(f"Health probe {target} returned HTTP {response.status_code}")
            return None

        try:
            body = response.json()
        except ValueError:
            logger.debug(f"Health probe {target} returned invalid JSON")
            return None

        version = body.get("version") if isinstance(body, dict) else None
        return str(version) if version else None

    async def probe_many(self, urls: Iterable[str]) -> Dict[str, bool]:
        """
        Probe several URLs concurrently and wait for all of them

        Each probe is bounded by the timeout on its own, so one slow URL
        only marks itself unhealthy.

        Args:
            urls: Base URLs

        Returns:
            Mapping of URL to health
        """
        unique = list(dict.fromkeys(u for u in urls if u))
        if not unique:
            return {}

        async with self._client() as client:
            async def check(url: str) -> bool:
                return await self.probe(url, client) is not None

            results = await gather_all(unique, check)

        healthy = dict(zip(unique, results))
        logger.info(f"Health: {sum(healthy.values())}/{len(healthy)} URL(s) healthy")
        return healthy

    async def fetch_health(self, url: str) -> HealthReport:
        """
        Strict health request used by smoke tests

        Args:
            url: Base URL of the worker

        Returns:
            Parsed health report; version is "?" when the field is absent

        Raises:
            HealthCheckError: On network error, timeout, non-2xx or invalid JSON
        """
        target = self.health_url(url)
        async with self._client() as client:
            try:
                response = await client.get(target)
            except httpx.HTTPError as e:
                raise HealthCheckError(target, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise HealthCheckError(target, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise HealthCheckError(target, "invalid JSON") from e

        if not isinstance(body, dict):
            raise HealthCheckError(target, "unexpected response body")

        return HealthReport(
            status_code=response.status_code,
            version=str(body.get("version") or UNKNOWN_VERSION),
            status=body.get("status"),
            timestamp=body.get("timestamp")
        )

    async def fetch_index(self, url: str) -> int:
        """
        Strict GET of the root page

        Args:
            url: Base URL of the worker

        Returns:
            Body size in bytes

        Raises:
            HealthCheckError: On network error, timeout or non-2xx
        """
        target = url.rstrip("/") + "/"
        async with self._client() as client:
            try:
                response = await client.get(target)
            except httpx.HTTPError as e:
                raise HealthCheckError(target, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise HealthCheckError(target, f"HTTP {response.status_code}")

        return len(response.content)
