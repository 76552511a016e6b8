"""
Download certificates and private keys from a CertWarden server
"""

import logging
import os
from urllib.parse import quote

import requests

from ..common.errors import FetchError

logger = logging.getLogger(__name__)

API_PATH = '/certwarden/api/v1/download'
API_KEY_HEADER = 'X-API-Key'
DOWNLOAD_TIMEOUT = 60

CERTIFICATES = 'certificates'
PRIVATE_KEYS = 'privatekeys'


def build_download_url(server, kind, name):
    """Return the download URL for a certificate or private key"""
    if kind not in (CERTIFICATES, PRIVATE_KEYS):
        raise ValueError(f"Unknown download kind: {kind}")
    return f"{server.rstrip('/')}{API_PATH}/{kind}/{quote(name, safe='')}"


def fetch_to_file(url, api_key, destination, session=None):
    """Download url into destination, raising FetchError unless HTTP 200"""
    http = session or requests
    logger.debug("Downloading %s", url)
    try:
        response = http.get(
            url,
            headers={API_KEY_HEADER: api_key},
            timeout=DOWNLOAD_TIMEOUT,
            allow_redirects=True,
        )
    except requests.exceptions.RequestException as e:
        logger.debug("Transport error fetching %s: %s", url, e)
        raise FetchError(url, 0) from e

    if response.status_code != 200:
        raise FetchError(url, response.status_code)

    fd = os.open(destination, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'wb') as f:
        f.write(response.content)

    logger.debug("Downloaded %d bytes from %s", len(response.content), url)
    return destination
