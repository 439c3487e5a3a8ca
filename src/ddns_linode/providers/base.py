"""
Base class for DNS providers.

This module defines the abstract base class that the DNS provider
implementation inherits from. An update is done in three steps because the
supported API offers no "get record by name" call: find the zone, find the
record within the zone, then update the record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseDNSProvider(ABC):
    """
    Abstract base class for DNS providers.

    Every method raises `DDNSError` on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Get the provider name.

        Returns
        -------
        str
            Provider name identifier.
        """
        ...

    @abstractmethod
    def find_zone_id(self, zone: str) -> str:
        """
        Find the identifier of a zone owned by the account.

        Parameters
        ----------
        zone : str
            The DNS zone (root domain name, e.g., "example.com").

        Returns
        -------
        str
            The zone identifier.
        """
        ...

    @abstractmethod
    def find_record_id(self, zone_id: str, zone: str, record: str) -> str:
        """
        Find the identifier of a record within a zone.

        Parameters
        ----------
        zone_id : str
            The zone identifier.
        zone : str
            The DNS zone name (for messages).
        record : str
            The host record name (e.g., "home").

        Returns
        -------
        str
            The record identifier.
        """
        ...

    @abstractmethod
    def update_record(
        self,
        zone_id: str,
        record_id: str,
        value: str,
        ttl: int,
    ) -> None:
        """
        Point a record at a new value.

        Parameters
        ----------
        zone_id : str
            The zone identifier.
        record_id : str
            The record identifier.
        value : str
            The record value (IP address).
        ttl : int
            Time to live in seconds.
        """
        ...

    def build_fqdn(self, zone: str, record: str) -> str:
        """
        Build the fully qualified domain name.

        Parameters
        ----------
        zone : str
            The DNS zone (root domain).
        record : str
            The host record name.

        Returns
        -------
        str
            The FQDN.
        """
        if record in {"@", ""}:
            return zone
        return f"{record}.{zone}"
