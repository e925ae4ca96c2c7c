import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..core.config import config

logger = logging.getLogger(__name__)

# Host used in request URLs when talking over a unix socket; the socket path carries the real address.
UDS_BASE_URL = "http://podman"


def unix_socket_path(uri: str) -> str:
    """Socket path of a unix:// URI. unix://run/podman.sock puts "run" in the netloc, so it is kept."""
    parsed = urlparse(uri)
    return parsed.netloc + parsed.path


def get_async_http_client(
    uri: str,
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    verify: bool = True,
) -> httpx.AsyncClient:
    """
    Returns an httpx.AsyncClient bound to the engine endpoint ``uri`` with:
    - A unix socket transport for ``unix://`` URIs, the URI itself as base URL otherwise
      (``tcp://host:port`` becomes ``http://host:port``).
    - Default timeouts (connect and read).
    - Standard User-Agent header.

    Raises:
        ValueError: If the URI scheme is not unix, tcp, http or https.
    """
    c_timeout = connect_timeout if connect_timeout is not None else config.DEFAULT_TIMEOUT_CONNECT
    r_timeout = read_timeout if read_timeout is not None else config.DEFAULT_TIMEOUT_READ

    timeout = httpx.Timeout(r_timeout, connect=c_timeout)

    headers = {"User-Agent": config.USER_AGENT}

    parsed = urlparse(uri)
    if parsed.scheme == "unix":
        socket_path = unix_socket_path(uri)
        logger.debug("Using unix socket transport at %s", socket_path)
        return httpx.AsyncClient(
            base_url=UDS_BASE_URL,
            transport=httpx.AsyncHTTPTransport(uds=socket_path),
            timeout=timeout,
            headers=headers,
        )
    if parsed.scheme in ("tcp", "http", "https"):
        # tcp:// is the plain-HTTP service address form used by podman's CONTAINER_HOST.
        base_url = parsed._replace(scheme="http").geturl() if parsed.scheme == "tcp" else uri
        return httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers=headers,
            verify=verify,
            follow_redirects=True,
        )
    raise ValueError(f"Unsupported engine URI scheme '{parsed.scheme}' in '{uri}'.")
