"""
Linode DNS provider implementation.

This module implements the Linode DNS API: form-encoded POST requests to a
single endpoint, selecting the operation with `api_action` and authenticating
with `api_key`. Every response is a JSON object of the form
``{"ERRORARRAY": [{"ERRORCODE": int, "ERRORMESSAGE": str}], "DATA": ...}``.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ddns_linode.models import DDNSError, ResultCode
from ddns_linode.providers.base import BaseDNSProvider
from ddns_linode.transport import post_form

if TYPE_CHECKING:
    from typing import Any, Final

    import httpx


# Linode API base URL
LINODE_API_BASE: Final[str] = "https://api.linode.com/"

# Linode error codes with a dedicated result code; others map to "911"
LINODE_ERRORS: Final[dict[int, ResultCode]] = {
    4: ResultCode.BADAUTH,
    5: ResultCode.NOHOST,
}

_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


logger = logging.getLogger(__name__)


def map_linode_error(error_code: Any) -> ResultCode:
    """
    Translate a Linode error code into a result code.

    Parameters
    ----------
    error_code : Any
        The ERRORCODE value from the response (an int, possibly as string).

    Returns
    -------
    ResultCode
        The mapped result code, "911" for unknown codes.
    """
    try:
        return LINODE_ERRORS.get(int(error_code), ResultCode.GENERIC)
    except (TypeError, ValueError):
        return ResultCode.GENERIC


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def _entries(data: Any) -> list[dict[str, Any]]:
    """Keep the object entries of a list payload, ignoring anything else."""
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


class LinodeProvider(BaseDNSProvider):
    """
    Linode DNS provider.

    Parameters
    ----------
    api_key : str
        Linode API key.
    client : httpx.Client
        HTTP client.
    api_url : str, optional
        Base endpoint of the API.
    """

    def __init__(
        self,
        api_key: str,
        client: httpx.Client,
        api_url: str = LINODE_API_BASE,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self._api_url = api_url

    @property
    def name(self) -> str:
        """Get the provider name."""
        return "linode"

    def call(self, action: str, **params: str | int) -> Any:
        """
        Call a Linode API action.

        Parameters
        ----------
        action : str
            The API action (e.g., "domain.list").
        **params : str | int
            Action-specific parameters.

        Returns
        -------
        Any
            The DATA member of the response.

        Raises
        ------
        DDNSError
            If the request fails, the response is not a JSON object or
            Linode reports an error.
        """
        form = {"api_key": self._api_key, "api_action": action}
        form.update({key: str(value) for key, value in params.items()})

        response = post_form(self._client, self._api_url, form)
        logger.debug("[linode] %s -> %d", action, response.status_code)
        logger.debug("[linode] Response: %s", response.text)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            msg = f"bad linode response: '{collapse_whitespace(response.text)}'"
            raise DDNSError(msg, ResultCode.GENERIC)

        errors = data.get("ERRORARRAY")
        if errors:
            if not isinstance(errors, list):
                msg = f"bad linode response: '{collapse_whitespace(response.text)}'"
                raise DDNSError(msg, ResultCode.GENERIC)

            first = errors[0]
            if not isinstance(first, dict):
                logger.error("[linode] %s failed with error entry: %r", action, first)
                msg = f"linode error: '{first}'"
                raise DDNSError(msg, ResultCode.GENERIC)

            error_code = first.get("ERRORCODE")
            code = map_linode_error(error_code)
            logger.error(
                "[linode] %s failed with error code %s: '%s'",
                action,
                error_code,
                first.get("ERRORMESSAGE"),
            )
            msg = f"linode error: '{first.get('ERRORMESSAGE', 'Unknown error')}'"
            raise DDNSError(msg, code)

        return data.get("DATA")

    def find_zone_id(self, zone: str) -> str:
        """
        Find the DOMAINID of a domain zone.

        Parameters
        ----------
        zone : str
            The primary domain (e.g., "example.com").

        Returns
        -------
        str
            The zone identifier.

        Raises
        ------
        DDNSError
            With "nohost" if the account has no such zone.
        """
        for item in _entries(self.call("domain.list")):
            if item.get("DOMAIN") == zone and item.get("DOMAINID") is not None:
                zone_id = str(item["DOMAINID"])
                logger.debug("[linode] Zone ID for %s: %s", zone, zone_id)
                return zone_id

        msg = f"linode domain zone not found: '{zone}'"
        raise DDNSError(msg, ResultCode.NOHOST)

    def find_record_id(self, zone_id: str, zone: str, record: str) -> str:
        """
        Find the RESOURCEID of a record within a zone.

        Parameters
        ----------
        zone_id : str
            The zone identifier.
        zone : str
            The zone name.
        record : str
            The subdomain (e.g., "home").

        Returns
        -------
        str
            The record identifier.

        Raises
        ------
        DDNSError
            With "nohost" if the zone has no such record.
        """
        for item in _entries(self.call("domain.resource.list", DomainID=zone_id)):
            if item.get("NAME") == record and item.get("RESOURCEID") is not None:
                record_id = str(item["RESOURCEID"])
                logger.debug(
                    "[linode] Record ID for %s: %s",
                    self.build_fqdn(zone, record),
                    record_id,
                )
                return record_id

        msg = f"linode subdomain not found: '{self.build_fqdn(zone, record)}'"
        raise DDNSError(msg, ResultCode.NOHOST)

    def update_record(
        self,
        zone_id: str,
        record_id: str,
        value: str,
        ttl: int,
    ) -> None:
        """
        Set the target and TTL of a record.

        Parameters
        ----------
        zone_id : str
            The zone identifier.
        record_id : str
            The record identifier.
        value : str
            The new target (IP address).
        ttl : int
            Time to live in seconds.
        """
        self.call(
            "domain.resource.update",
            DomainID=zone_id,
            ResourceID=record_id,
            Target=value,
            TTL_sec=ttl,
        )
        logger.info("[linode] Record %s updated to %s (ttl=%d)", record_id, value, ttl)
