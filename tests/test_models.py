"""Tests for data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ddns_linode.models import (
    DDNSError,
    InvocationRequest,
    ResultCode,
    UpdateResult,
)


class TestResultCode:
    """Tests for ResultCode enum."""

    def test_code_values(self):
        assert ResultCode.GOOD == "good"
        assert ResultCode.NOCHG == "nochg"
        assert ResultCode.BADAUTH == "badauth"
        assert ResultCode.NOHOST == "nohost"
        assert ResultCode.BADAGENT == "badagent"
        assert ResultCode.BADCONN == "badconn"
        assert ResultCode.BADRESOLV == "badresolv"
        assert ResultCode.GENERIC == "911"

    def test_code_prints_as_value(self):
        assert str(ResultCode.GENERIC) == "911"
        assert f"{ResultCode.NOHOST}" == "nohost"

    def test_code_from_string(self):
        assert ResultCode("badauth") == ResultCode.BADAUTH
        assert ResultCode("911") == ResultCode.GENERIC


class TestDDNSError:
    """Tests for DDNSError."""

    def test_default_code_is_generic(self):
        error = DDNSError("something broke")
        assert error.code == ResultCode.GENERIC
        assert error.message == "something broke"
        assert str(error) == "something broke"

    def test_explicit_code(self):
        error = DDNSError("zone missing", ResultCode.NOHOST)
        assert error.code == ResultCode.NOHOST


class TestInvocationRequest:
    """Tests for InvocationRequest parsing."""

    def test_parse_four_tokens(self):
        request = InvocationRequest.parse("example.com ABCD1234 home 203.0.113.5")
        assert request.domain == "example.com"
        assert request.api_key == "ABCD1234"
        assert request.subdomain == "home"
        assert request.ip_source == "203.0.113.5"

    def test_parse_tolerates_repeated_whitespace(self):
        request = InvocationRequest.parse("example.com\tABCD1234  home 203.0.113.5\n")
        assert request.subdomain == "home"
        assert request.ip_source == "203.0.113.5"

    def test_ip_source_is_not_validated(self):
        request = InvocationRequest.parse("example.com key home not-an-ip")
        assert request.ip_source == "not-an-ip"

    @pytest.mark.parametrize(
        "raw",
        [
            "example.com key1 home",
            "example.com key1 home 203.0.113.5 extra",
            "",
            "   ",
            None,
        ],
    )
    def test_parse_wrong_token_count(self, raw):
        with pytest.raises(DDNSError) as exc_info:
            InvocationRequest.parse(raw)
        assert exc_info.value.code == ResultCode.GENERIC
        assert "invalid script arguments" in exc_info.value.message

    def test_request_is_immutable(self):
        request = InvocationRequest.parse("example.com key home 203.0.113.5")
        with pytest.raises(ValidationError):
            request.domain = "example.org"

    def test_api_key_hidden_from_repr(self):
        request = InvocationRequest.parse("example.com SECRETKEY home 203.0.113.5")
        assert "SECRETKEY" not in repr(request)


class TestUpdateResult:
    """Tests for UpdateResult."""

    def test_updated(self):
        result = UpdateResult.updated("203.0.113.5")
        assert result.code == ResultCode.GOOD
        assert result.message == "ip successfully updated: '203.0.113.5'"
        assert result.ip == "203.0.113.5"
        assert result.success is True

    def test_unchanged(self):
        result = UpdateResult.unchanged("203.0.113.5")
        assert result.code == ResultCode.NOCHG
        assert result.message == "ip address unchanged: '203.0.113.5'"
        assert result.success is True

    def test_from_error(self):
        error = DDNSError("linode error: 'Authentication failed'", ResultCode.BADAUTH)
        result = UpdateResult.from_error(error, ip="203.0.113.5")
        assert result.code == ResultCode.BADAUTH
        assert result.message == "linode error: 'Authentication failed'"
        assert result.ip == "203.0.113.5"
        assert result.success is False

    def test_from_error_without_ip(self):
        result = UpdateResult.from_error(DDNSError("bad arguments"))
        assert result.code == ResultCode.GENERIC
        assert result.ip is None
