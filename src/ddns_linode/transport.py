"""
HTTP transport helpers.

Every network request of an update run goes through the helpers in this
module so that timeouts are applied uniformly and transport failures are
classified into result codes in one place. There are no retries: the NAS
re-invokes the script on its own schedule.
"""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING

import httpx

from ddns_linode import __version__
from ddns_linode.models import DDNSError, ResultCode

if TYPE_CHECKING:
    from typing import Final

    from ddns_linode.config import LinodeConfig


USER_AGENT: Final[str] = f"ddns-linode/{__version__}"

# Fragments of resolver error messages, for failures not chained to a gaierror
_RESOLVE_ERROR_HINTS: Final[tuple[str, ...]] = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "getaddrinfo failed",
)


logger = logging.getLogger(__name__)


def build_http_client(
    config: LinodeConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """
    Create the HTTP client shared by every request of a run.

    Parameters
    ----------
    config : LinodeConfig
        Provides the connect and overall timeouts.
    transport : httpx.BaseTransport | None, optional
        Transport to use instead of the network (e.g., `httpx.MockTransport`).

    Returns
    -------
    httpx.Client
        The configured client.
    """
    timeout = httpx.Timeout(config.timeout, connect=config.connect_timeout)
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    )


def _is_resolve_error(exc: BaseException) -> bool:
    """
    Check whether a connection error was caused by a failed name lookup.

    Parameters
    ----------
    exc : BaseException
        The connection error.

    Returns
    -------
    bool
        True if the host name could not be resolved.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        current = current.__cause__ or current.__context__

    message = str(exc).lower()
    return any(hint in message for hint in _RESOLVE_ERROR_HINTS)


def classify_transport_error(exc: httpx.HTTPError) -> ResultCode:
    """
    Map an httpx error to a result code.

    Parameters
    ----------
    exc : httpx.HTTPError
        The error raised by httpx.

    Returns
    -------
    ResultCode
        "badconn" for timeouts, "badresolv" for name resolution failures,
        "badagent" for malformed URLs and "911" for anything else.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ResultCode.BADCONN
    if isinstance(exc, httpx.ConnectError) and _is_resolve_error(exc):
        return ResultCode.BADRESOLV
    if isinstance(exc, httpx.UnsupportedProtocol):
        return ResultCode.BADAGENT
    return ResultCode.GENERIC


def _request(
    client: httpx.Client,
    method: str,
    url: str,
    data: dict[str, str] | None = None,
) -> httpx.Response:
    """
    Send a request, converting transport failures into `DDNSError`.

    Parameters
    ----------
    client : httpx.Client
        HTTP client.
    method : str
        HTTP method.
    url : str
        Target URL.
    data : dict[str, str] | None, optional
        Form fields to send in the body.

    Returns
    -------
    httpx.Response
        The response, whatever its status code.

    Raises
    ------
    DDNSError
        If the request could not be completed.
    """
    try:
        response = client.request(method, url, data=data)
    except httpx.InvalidURL as e:
        msg = f"failed http request: '{e}'"
        raise DDNSError(msg, ResultCode.BADAGENT) from e
    except httpx.HTTPError as e:
        code = classify_transport_error(e)
        logger.error("[http] %s %s failed: '%s' (%s)", method, url, e, code)  # noqa: TRY400
        msg = f"failed http request: '{str(e) or type(e).__name__}'"
        raise DDNSError(msg, code) from e

    logger.debug("[http] %s %s -> %d", method, url, response.status_code)
    return response


def post_form(
    client: httpx.Client,
    url: str,
    data: dict[str, str],
) -> httpx.Response:
    """
    POST form-encoded fields.

    Parameters
    ----------
    client : httpx.Client
        HTTP client.
    url : str
        Target URL.
    data : dict[str, str]
        Form fields.

    Returns
    -------
    httpx.Response
        The response.
    """
    return _request(client, "POST", url, data=data)


def get_text(client: httpx.Client, url: str) -> str:
    """
    GET a URL and return the response body as text.

    Parameters
    ----------
    client : httpx.Client
        HTTP client.
    url : str
        Target URL.

    Returns
    -------
    str
        The response body.
    """
    return _request(client, "GET", url).text
