from __future__ import annotations

"""Lightweight HTTP client util with optional retry.

Uses stdlib urllib; the provider only needs GET JSON. Retries default to zero
because the scheduler already retries on its next tick.
"""
import http.client
import json
import time
import urllib.request
from typing import Any, Dict, Optional

from kurswatch.core.errors import HttpError


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 0, backoff: float = 0.5
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            req = urllib.request.Request(url, headers={"Accept": "application/json"})
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 300:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                data = resp.read()
                payload = json.loads(data.decode("utf-8"))
                if not isinstance(payload, dict):
                    raise HttpError(f"Expected JSON object from {url}")
                return payload
        except (
            OSError,  # URLError, timeouts, resets after the request was sent
            http.client.HTTPException,  # RemoteDisconnected, IncompleteRead
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
