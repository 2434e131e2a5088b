"""Lookup of the current Node.js LTS release."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from ..errors import ExternalToolError

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://nodejs.org/dist/index.json"


def get_node_lts_version(
    index_url: str = DEFAULT_INDEX_URL,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Return the newest LTS version of Node.js, e.g. ``"20.11.1"``.

    The distribution index lists releases newest first; the first entry with a
    truthy ``lts`` field is the current LTS.

    Raises:
        ExternalToolError: If the index cannot be fetched or has no LTS release
    """
    http = session or requests
    logger.debug("Fetching Node.js release index: %s", index_url)
    try:
        response = http.get(index_url, timeout=timeout)
        response.raise_for_status()
        releases = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise ExternalToolError(f"Unable to determine the current Node.js LTS version: {exc}") from exc

    for release in releases:
        if release.get("lts"):
            version = str(release["version"]).lstrip("v")
            logger.debug("Current Node.js LTS is %s (%s)", version, release["lts"])
            return version

    raise ExternalToolError(f"No LTS release found in {index_url}")
