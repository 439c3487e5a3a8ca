"""
Data models for DDNS Linode.

This module defines the core data structures used throughout the application,
including the result code enumeration understood by the Synology DDNS service,
the parsed invocation request, the terminal update result and the single
error type raised by every step of an update run.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ResultCode(StrEnum):
    """
    Result codes reported to the Synology DDNS service on stdout.

    Attributes
    ----------
    GOOD : str
        The record was updated.
    NOCHG : str
        The IP address is unchanged since the last run; nothing was sent.
    BADAUTH : str
        Linode rejected the API key.
    NOHOST : str
        The domain zone or the subdomain record does not exist.
    BADAGENT : str
        The IP address supplied (or fetched) is malformed.
    BADCONN : str
        A network request timed out.
    BADRESOLV : str
        The remote host name could not be resolved.
    GENERIC : str
        Any other failure.
    """

    GOOD = "good"
    NOCHG = "nochg"
    BADAUTH = "badauth"
    NOHOST = "nohost"
    BADAGENT = "badagent"
    BADCONN = "badconn"
    BADRESOLV = "badresolv"
    GENERIC = "911"


class DDNSError(Exception):
    """
    Exception raised when an update run cannot complete.

    Attributes
    ----------
    code : ResultCode
        The result code reported for this failure.
    message : str
        Human-readable error message.
    """

    def __init__(self, message: str, code: ResultCode = ResultCode.GENERIC) -> None:
        """
        Initialize DDNSError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        code : ResultCode, optional
            The result code, defaults to the generic failure code.
        """
        self.code = code
        self.message = message
        super().__init__(message)


class InvocationRequest(BaseModel):
    """
    Arguments passed by the Synology DDNS service.

    The NAS hands the script a single string made of four space separated
    tokens: ``<domain> <api-key> <subdomain> <ip>``. On the NAS side these map
    to the "Username/Email", "Password" and "Hostname" fields of the provider
    entry, plus the IP address the NAS detected.

    Attributes
    ----------
    domain : str
        Primary domain hosted with Linode DNS (e.g., "example.com").
    api_key : str
        Linode API key.
    subdomain : str
        Name of the record to update (e.g., "home").
    ip_source : str
        Text reported by the NAS that contains the current IP address.
    """

    domain: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, repr=False)
    subdomain: str = Field(..., min_length=1)
    ip_source: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, raw: str | None) -> InvocationRequest:
        """
        Parse the raw invocation string.

        Parameters
        ----------
        raw : str | None
            The single argument given to the script.

        Returns
        -------
        InvocationRequest
            The parsed request.

        Raises
        ------
        DDNSError
            If the argument does not consist of exactly four tokens.
        """
        tokens = (raw or "").split()
        if len(tokens) != 4:  # noqa: PLR2004
            msg = "synology ddns service provided invalid script arguments"
            raise DDNSError(msg, ResultCode.GENERIC)

        domain, api_key, subdomain, ip_source = tokens
        return cls(
            domain=domain,
            api_key=api_key,
            subdomain=subdomain,
            ip_source=ip_source,
        )


class UpdateResult(BaseModel):
    """
    Terminal outcome of one update run.

    Exactly one result is produced per run. It is printed (code only) for the
    NAS and appended to the result journal.

    Attributes
    ----------
    code : ResultCode
        The result code.
    message : str
        Human-readable message describing the outcome.
    ip : str | None
        The resolved IP address, when the run got that far.
    """

    code: ResultCode
    message: str
    ip: str | None = None

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        """Whether the run ended without an error (updated or unchanged)."""
        return self.code in {ResultCode.GOOD, ResultCode.NOCHG}

    @classmethod
    def updated(cls, ip: str) -> UpdateResult:
        """
        Create the result for a successful update.

        Parameters
        ----------
        ip : str
            The IP address now stored in the record.

        Returns
        -------
        UpdateResult
            A "good" result.
        """
        return cls(
            code=ResultCode.GOOD,
            message=f"ip successfully updated: '{ip}'",
            ip=ip,
        )

    @classmethod
    def unchanged(cls, ip: str) -> UpdateResult:
        """
        Create the result for an IP address equal to the last known one.

        Parameters
        ----------
        ip : str
            The resolved IP address.

        Returns
        -------
        UpdateResult
            A "nochg" result.
        """
        return cls(
            code=ResultCode.NOCHG,
            message=f"ip address unchanged: '{ip}'",
            ip=ip,
        )

    @classmethod
    def from_error(cls, error: DDNSError, ip: str | None = None) -> UpdateResult:
        """
        Create a failure result from an error.

        Parameters
        ----------
        error : DDNSError
            The error that ended the run.
        ip : str | None, optional
            The resolved IP address, if known.

        Returns
        -------
        UpdateResult
            A result carrying the error's code and message.
        """
        return cls(code=error.code, message=error.message, ip=ip)
