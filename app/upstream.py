"""
Client for the upstream recommendation service.

One GET per call, no retries:
    GET {UPSTREAM_URL}?query=<encoded>&max_results=5

The query is encoded the way browsers' encodeURIComponent does it, so
"java developer" goes out as "java%20developer" rather than "java+developer".
"""

import logging
import os
from urllib.parse import quote

import requests
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)

UPSTREAM_URL = os.getenv(
    "UPSTREAM_URL", "https://vishalpainjane-shl-assignment.hf.space/recommend"
)
MAX_RESULTS = 5

# Characters encodeURIComponent leaves alone on top of quote()'s defaults
_URI_COMPONENT_SAFE = "!~*'()"


def _timeout() -> float | None:
    raw = os.getenv("UPSTREAM_TIMEOUT")
    return float(raw) if raw else None


def encode_query(query: str) -> str:
    """Percent-encode a query string as a single URL component."""
    return quote(query, safe=_URI_COMPONENT_SAFE)


def build_url(query: str, base_url: str | None = None) -> str:
    base_url = base_url or UPSTREAM_URL
    return f"{base_url}?query={encode_query(query)}&max_results={MAX_RESULTS}"


def fetch(query: str) -> requests.Response:
    """Send the query upstream and return the raw response, whatever its status."""
    url = build_url(query)
    log.info("Upstream GET %s", url)
    return requests.get(url, timeout=_timeout())
