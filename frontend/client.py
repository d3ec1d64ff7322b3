"""
HTTP client used by the search view.

Posts {"query": ...} to the proxy and returns its "results" list. Every
failure (transport, HTTP status, undecodable body) is raised as SearchError
carrying the message the view should show.
"""

import logging
import os

import requests
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)

API_URL = os.getenv("API_URL", "http://localhost:8000/api/recommend")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "30"))

FETCH_FAILED_MESSAGE = "Failed to fetch results"
GENERIC_ERROR_MESSAGE = "An error occurred while fetching data"


class SearchError(Exception):
    """A search attempt failed; str(exc) is the user-facing message."""


def fetch_recommendations(query: str, api_url: str = API_URL) -> list[dict]:
    try:
        resp = requests.post(api_url, json={"query": query}, timeout=API_TIMEOUT)
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning("Search request failed: %s", exc)
        raise SearchError(str(exc) or GENERIC_ERROR_MESSAGE) from exc

    if not resp.ok:
        message = data.get("error") if isinstance(data, dict) else None
        log.warning("Proxy returned %d: %r", resp.status_code, data)
        raise SearchError(message or FETCH_FAILED_MESSAGE)

    if not isinstance(data, dict):
        return []
    return data.get("results") or []
