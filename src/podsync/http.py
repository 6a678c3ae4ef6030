"""Shared HTTP session for feed fetches and device calls."""

import logging

import requests
from requests.adapters import HTTPAdapter

from podsync import __version__

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"podsync/{__version__}"
DEFAULT_TIMEOUT = 30.0


def create_session(
    proxy: str | None = None,
    user_agent: str | None = None,
    pool_size: int = 10,
) -> requests.Session:
    """Create the single requests session used for a whole run.

    Retries are disabled; a failed call is reported and skipped by the caller.

    Args:
        proxy: Optional forward proxy URL applied to http and https traffic
        user_agent: Custom user agent string
        pool_size: Connection pool size per host, at least the worker count

    Returns:
        Configured requests.Session
    """
    session = requests.Session()

    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": user_agent or DEFAULT_USER_AGENT})

    if proxy:
        logger.debug(f"Routing HTTP traffic through proxy {proxy}")
        session.proxies.update({"http": proxy, "https": proxy})

    return session
