"""Minimal HTTP JSON helpers for provider clients."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_AUTH_STATUS_CODES = {401, 403}


def post_json(url: str, payload: dict[str, Any], headers: dict[str, str], timeout_sec: float = 60.0) -> dict[str, Any]:
    """POST a JSON payload and decode the JSON response.

    Rejected credentials raise ConfigurationError; other transport failures raise RuntimeError.
    """
    body = json.dumps(payload).encode("utf-8")
    request = Request(url=url, data=body, method="POST")
    request.add_header("Content-Type", "application/json")
    for key, value in headers.items():
        request.add_header(key, value)

    logger.debug("POST %s", url)
    try:
        with urlopen(request, timeout=timeout_sec) as response:
            raw = response.read().decode("utf-8")
            return json.loads(raw) if raw else {}
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        if exc.code in _AUTH_STATUS_CODES:
            raise ConfigurationError(f"Credentials rejected by {url} (HTTP {exc.code}): {detail}") from exc
        raise RuntimeError(f"HTTP {exc.code} from {url}: {detail}") from exc
    except URLError as exc:
        raise RuntimeError(f"Network error calling {url}: {exc.reason}") from exc
