"""Shared ``requests`` session setup for the provider clients."""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# Transport-level statuses worth retrying; 4xx and empty results never are.
RETRY_STATUSES = (502, 503, 504)


def build_session(max_retries: int = 2, backoff_factor: float = 0.5) -> requests.Session:
    """Session that retries idempotent GETs with exponential backoff.

    POST requests and validated-empty responses are not retried.
    """
    retry = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session
