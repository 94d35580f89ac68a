"""
confkeeper.integrations.endpoint - HTTP Endpoint Readiness Polling
====================================================================

After a configuration change, the consuming service (Prometheus,
Alertmanager) usually reloads or restarts. wait_for_endpoint_available()
blocks until a given URL answers with the expected status code, using the
endpoint backoff schedule from confkeeper.orchestration.retry.

Connection errors during the wait are expected and retried; only the final
one is surfaced if the endpoint never comes up.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx
import structlog

from confkeeper.orchestration.retry import (
    ENDPOINT_BACKOFF_SCHEDULE,
    BackoffSchedule,
    retry,
)


logger = structlog.get_logger()


async def wait_for_endpoint_available(
    url: str,
    *,
    method: str = "GET",
    host: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
    payload: Optional[str] = None,
    auth: Optional[tuple[str, str]] = None,
    expected_status: int = 200,
    schedule: BackoffSchedule = ENDPOINT_BACKOFF_SCHEDULE,
    request_timeout: float = 10.0,
    verify: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Wait until ``url`` responds with ``expected_status``.

    Args:
        url: Endpoint to poll.
        method: HTTP method for each probe.
        host: Optional Host header override.
        headers: Extra request headers.
        payload: Optional request body.
        auth: Optional (username, password) for basic auth.
        expected_status: Status code that counts as available.
        schedule: Backoff schedule (default: 10 attempts from 3s, doubling).
        request_timeout: Per-request timeout in seconds.
        verify: Verify TLS certificates.
        transport: Custom httpx transport (tests use httpx.MockTransport).

    Raises:
        httpx.HTTPError: The last transport error, if the final attempts
            failed to connect.
        RetryTimeoutError: The endpoint answered, but never with
            ``expected_status``.
    """
    request_headers = dict(headers or {})
    if host:
        request_headers["Host"] = host

    log = logger.bind(component="endpoint_waiter", url=url)
    log.info("waiting_for_endpoint", expected_status=expected_status)
    started = time.monotonic()

    async with httpx.AsyncClient(
        timeout=request_timeout,
        verify=verify,
        auth=auth,
        transport=transport,
    ) as client:

        async def _probe() -> bool:
            response = await client.request(
                method,
                url,
                headers=request_headers,
                content=payload,
            )
            return response.status_code == expected_status

        try:
            await retry(schedule, _probe)
        finally:
            log.info(
                "endpoint_wait_finished",
                wait_seconds=round(time.monotonic() - started, 3),
            )
