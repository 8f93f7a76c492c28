"""Prometheus Pushgateway client.

Usage:
    gateway = PushGateway(url="https://push.example.com", job="lint-lab")
    gateway.push(render(families, "prometheus"))

The whole group ``/metrics/job/<job>`` is replaced on every push (HTTP PUT).
"""

from urllib.parse import quote

import requests

from lint_lab.reports.metrics import CONTENT_TYPES


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class PushGatewayError(Exception):
    """Base exception for all Pushgateway errors."""


class AuthenticationError(PushGatewayError):
    """Raised on HTTP 401/403."""


class NetworkError(PushGatewayError):
    """Raised on connection timeout or unreachable gateway."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class PushGateway:
    """Thin wrapper around the Pushgateway HTTP API."""

    def __init__(self, url: str, job: str, timeout: int = 30) -> None:
        self.base_url = url.rstrip("/")
        self.job = job
        self._timeout = timeout
        self._session = requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/metrics/job/{quote(self.job, safe='')}"

    def push(self, body: str) -> None:
        """Replace the job's metric group with *body* (Prometheus text format).

        Raises:
            AuthenticationError: HTTP 401 / 403
            PushGatewayError:    Any other non-2xx response
            NetworkError:        Timeout or connection failure
        """
        url = self.endpoint
        try:
            response = self._session.put(
                url,
                data=body.encode("utf-8"),
                headers={"Content-Type": CONTENT_TYPES["prometheus"]},
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise NetworkError(
                f"Request timed out after {self._timeout}s while contacting '{url}'"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise NetworkError(
                f"Unable to reach Pushgateway at '{self.base_url}'"
            ) from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Pushgateway rejected the request ({response.status_code}) — check credentials."
            )
        if not response.ok:
            raise PushGatewayError(
                f"Unexpected response {response.status_code} from {url}: {response.text[:200]}"
            )
