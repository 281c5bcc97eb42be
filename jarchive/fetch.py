"""
fetch.py — Download J!Archive pages

Thin wrapper over a requests.Session. Transient server errors and network
errors get one more try; anything else is reported and the caller moves on.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from jarchive.config import MAX_RETRIES, REQUEST_TIMEOUT, TRANSIENT_RETRY_CODES, USER_AGENT

logger = logging.getLogger(__name__)


def make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def fetch_html(session: requests.Session, url: str) -> Optional[str]:
    """Page text, or None if it could not be fetched."""
    max_attempts = 1 + MAX_RETRIES  # total attempts = initial + retries
    attempt = 0
    while attempt < max_attempts:
        attempt += 1
        try:
            resp = session.get(url, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.text
        except requests.exceptions.HTTPError as e:
            status = getattr(e.response, "status_code", None)
            if status in TRANSIENT_RETRY_CODES and attempt < max_attempts:
                logger.warning(f"HTTP error {status} for {url} (attempt {attempt}/{max_attempts})...")
                continue
            logger.warning(f"HTTP error {status} for {url}: {e}")
            return None
        except requests.exceptions.RequestException as e:
            if attempt < max_attempts:
                logger.warning(f"Network error on {url} (attempt {attempt}/{max_attempts}): {e}")
                continue
            logger.warning(f"Unrecoverable error on {url} after {max_attempts} attempts: {e}")
            return None
    return None


def fetch_document(session: requests.Session, url: str) -> Optional[BeautifulSoup]:
    html = fetch_html(session, url)
    if html is None:
        return None
    return BeautifulSoup(html, "html.parser")
