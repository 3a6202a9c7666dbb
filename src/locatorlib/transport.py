"""HTTP transport for remote providers, built on httpx."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from locatorlib.exceptions import ParseFailure, TransportFailure
from locatorlib.models import ServiceMethod, ServiceRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpTransport:
    """
    Sends ``ServiceRequest`` descriptors and returns ``(status, body)``.

    Every call carries a finite timeout. Network errors and timeouts are
    raised as TransportFailure; the HTTP status is returned as-is so that
    callers can read provider error envelopes.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._timeout = timeout

    def send(self, request: ServiceRequest) -> tuple[int, bytes]:
        headers = {"Content-Type": "application/json"}
        content = None
        if request.method is not ServiceMethod.GET:
            content = json.dumps(request.body or {}).encode("utf-8")

        logger.debug(
            "%s %s (%s)", request.method.value, request.url,
            request.identifier.value,
        )
        try:
            response = self._client.request(
                request.method.value,
                request.url,
                headers=headers,
                content=content,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise TransportFailure(request.url, "timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(request.url, str(exc)) from exc
        return response.status_code, response.content

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def parse_json_object(data: bytes) -> dict[str, Any]:
    """
    Decode a JSON object from *data*.

    Raises ParseFailure for invalid JSON or a non-object top level.
    """
    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise ParseFailure(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ParseFailure(
            f"expected a JSON object, got {type(payload).__name__}"
        )
    return payload
