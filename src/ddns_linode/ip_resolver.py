"""
Current IP address detection.

The NAS passes the IP address it detected, but that address is not always
reliable or externally reachable. An IP echo service can be configured to
replace it; in either case the first IPv4-shaped substring of the source text
is used.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ddns_linode.models import DDNSError, ResultCode
from ddns_linode.transport import get_text

if TYPE_CHECKING:
    from typing import Final

    import httpx

    from ddns_linode.config import IPConfig


IPV4_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:\d{1,3}\.){3}\d{1,3}")


logger = logging.getLogger(__name__)


def extract_ipv4(source: str) -> str:
    """
    Extract the first IPv4-shaped substring from a text.

    Octet ranges are not checked; "999.1.1.1" is accepted as the DNS
    provider performs the final validation.

    Parameters
    ----------
    source : str
        Text containing an IP address.

    Returns
    -------
    str
        The dotted-quad string.

    Raises
    ------
    DDNSError
        With "badagent" if no IPv4-shaped substring is found.
    """
    match = IPV4_PATTERN.search(source)
    if match is None:
        msg = f"new ip address not valid: '{source.strip()}'"
        raise DDNSError(msg, ResultCode.BADAGENT)
    return match.group(0)


class IPResolver:
    """
    Resolve the current IP address of the NAS.

    Parameters
    ----------
    config : IPConfig
        IP detection configuration.
    client : httpx.Client
        HTTP client used to query the IP echo service.
    """

    def __init__(self, config: IPConfig, client: httpx.Client) -> None:
        self._config = config
        self._client = client

    def resolve(self, ip_source: str) -> str:
        """
        Determine the current IP address.

        Parameters
        ----------
        ip_source : str
            The IP text reported by the NAS. Ignored when an IP echo service
            is configured.

        Returns
        -------
        str
            The resolved IPv4 address.

        Raises
        ------
        DDNSError
            If the IP echo service cannot be reached or no IP address is found.
        """
        url = self._config.alternative_url
        if url is not None:
            ip_source = get_text(self._client, url)
            logger.debug("[ip] IP echo service %s returned: %r", url, ip_source)

        ip = extract_ipv4(ip_source)
        logger.info("[ip] Current IP address: %s", ip)
        return ip
