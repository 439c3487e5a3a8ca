"""
Update run orchestration.

One run parses the NAS arguments, resolves the current IP address, compares
it with the last known one and, when it changed, updates the Linode record.
Each step raises `DDNSError` on failure; `DDNSUpdater.run` is the only place
where those errors are handled and turned into an `UpdateResult`.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ddns_linode.ip_resolver import IPResolver
from ddns_linode.models import DDNSError, InvocationRequest, UpdateResult
from ddns_linode.providers.linode import LinodeProvider
from ddns_linode.state import LastIpStore, ResultJournal
from ddns_linode.transport import build_http_client

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from ddns_linode.config import Config
    from ddns_linode.providers.base import BaseDNSProvider

    ProviderFactory = Callable[[str, httpx.Client, str], BaseDNSProvider]


logger = logging.getLogger(__name__)


class DDNSUpdater:
    """
    Run a single DDNS update.

    Parameters
    ----------
    config : Config
        Application configuration.
    client : httpx.Client | None, optional
        HTTP client to use. When omitted a client is created for each run and
        closed when the run ends.
    provider_factory : ProviderFactory | None, optional
        Builds the DNS provider from the API key, the HTTP client and the API
        URL. Defaults to `LinodeProvider`.
    """

    def __init__(
        self,
        config: Config,
        client: httpx.Client | None = None,
        provider_factory: ProviderFactory | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._provider_factory: ProviderFactory = provider_factory or LinodeProvider
        self.last_ip = LastIpStore(config.state.last_ip_path)
        self.journal = ResultJournal(config.state.journal_path)

    def run(self, raw: str | None) -> UpdateResult:
        """
        Perform one update run.

        Parameters
        ----------
        raw : str | None
            The argument string passed by the NAS:
            "<domain> <api-key> <subdomain> <ip>".

        Returns
        -------
        UpdateResult
            The outcome of the run. It has already been appended to the
            result journal.
        """
        start_time = time.monotonic()
        client = self._client
        if client is None:
            client = build_http_client(self.config.linode)
        ip: str | None = None

        try:
            request = InvocationRequest.parse(raw)
            logger.info(
                "[request] domain=%s subdomain=%s api_key=%s ip=%s",
                request.domain,
                request.subdomain,
                request.api_key,
                request.ip_source,
            )

            ip = IPResolver(self.config.ip, client).resolve(request.ip_source)

            if self.last_ip.matches(ip):
                result = UpdateResult.unchanged(ip)
            else:
                self._apply(request, ip, client)
                result = UpdateResult.updated(ip)
        except DDNSError as e:
            result = UpdateResult.from_error(e, ip)
        finally:
            if self._client is None:
                client.close()

        duration = time.monotonic() - start_time
        if result.success:
            logger.info(
                "[response] code=%s message=%s duration=%.2fs",
                result.code,
                result.message,
                duration,
            )
        else:
            logger.warning(
                "[response] code=%s message=%s duration=%.2fs",
                result.code,
                result.message,
                duration,
            )

        self.journal.append(result)
        return result

    def _apply(
        self,
        request: InvocationRequest,
        ip: str,
        client: httpx.Client,
    ) -> None:
        """
        Push a changed IP address to the DNS provider and remember it.

        Parameters
        ----------
        request : InvocationRequest
            The parsed NAS arguments.
        ip : str
            The new IP address.
        client : httpx.Client
            HTTP client.
        """
        provider = self._provider_factory(
            request.api_key,
            client,
            self.config.linode.api_url,
        )

        zone_id = provider.find_zone_id(request.domain)
        record_id = provider.find_record_id(zone_id, request.domain, request.subdomain)
        provider.update_record(zone_id, record_id, ip, self.config.linode.ttl)

        # Best-effort, the record is already updated
        self.last_ip.write(ip)
