from __future__ import annotations

import random
import time
from typing import Mapping, Optional, Sequence

import requests

TRANSIENT_STATUSES: Sequence[int] = (429, 500, 502, 503, 504)
TRANSIENT_ERRORS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)


def _backoff_seconds(attempt: int, *, backoff_base: float, backoff_max: float) -> float:
    # Exponential backoff with jitter
    base = backoff_base * (2 ** max(0, attempt - 1))
    return min(backoff_max, base + random.uniform(0, backoff_base))


def _retry_after_seconds(resp: requests.Response) -> Optional[float]:
    value = resp.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def http_get_with_retries(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: int = 30,
    max_attempts: int = 4,
    backoff_base: float = 0.5,
    backoff_max: float = 8.0,
    session: Optional[requests.Session] = None,
) -> bytes:
    """
    Download `url` and return the body, retrying transient failures.

    Connection errors, timeouts and 429/5xx answers are retried with
    exponential backoff (honouring `Retry-After`). Any other HTTP error is
    raised straight away through `raise_for_status()`; after the last attempt
    the final error is raised.
    """
    getter = session.get if session is not None else requests.get
    attempt = 0
    last_exc: Exception | None = None

    while attempt < max_attempts:
        attempt += 1
        try:
            resp = getter(url, headers=headers, timeout=timeout)
        except TRANSIENT_ERRORS as exc:
            last_exc = exc
            if attempt >= max_attempts:
                break
            time.sleep(_backoff_seconds(attempt, backoff_base=backoff_base, backoff_max=backoff_max))
            continue

        if resp.status_code in TRANSIENT_STATUSES and attempt < max_attempts:
            delay = _retry_after_seconds(resp)
            if delay is None:
                delay = _backoff_seconds(attempt, backoff_base=backoff_base, backoff_max=backoff_max)
            time.sleep(min(delay, backoff_max))
            continue

        resp.raise_for_status()
        return resp.content

    assert last_exc is not None
    raise last_exc


__all__ = ["http_get_with_retries", "TRANSIENT_STATUSES"]
