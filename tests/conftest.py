"""Shared fixtures: a fake Linode API served through httpx.MockTransport."""

from __future__ import annotations

from urllib.parse import parse_qsl

import httpx
import pytest

from ddns_linode.config import Config, StateConfig

LINODE_HOST = "api.linode.com"


class FakeLinodeAPI:
    """In-memory stand-in for the Linode API and an IP echo service."""

    def __init__(self) -> None:
        self.domains: list[dict] = [
            {"DOMAIN": "example.org", "DOMAINID": 7},
            {"DOMAIN": "example.com", "DOMAINID": 10},
        ]
        self.resources: dict[int, list[dict]] = {
            10: [
                {"NAME": "www", "RESOURCEID": 54, "TYPE": "a", "TARGET": "192.0.2.1"},
                {"NAME": "home", "RESOURCEID": 55, "TYPE": "a", "TARGET": "192.0.2.9"},
            ],
        }
        self.errors: dict[str, tuple[int, str]] = {}
        self.calls: list[dict[str, str]] = []
        self.echo_body = "Current IP Address: 198.51.100.7\n"
        self.echo_requests = 0

    @property
    def actions(self) -> list[str]:
        return [call["api_action"] for call in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host != LINODE_HOST:
            self.echo_requests += 1
            return httpx.Response(200, text=self.echo_body)

        form = dict(parse_qsl(request.content.decode()))
        self.calls.append(form)
        action = form["api_action"]

        if action in self.errors:
            code, message = self.errors[action]
            return httpx.Response(
                200,
                json={
                    "ERRORARRAY": [{"ERRORCODE": code, "ERRORMESSAGE": message}],
                    "DATA": {},
                    "ACTION": action,
                },
            )

        if action == "domain.list":
            data: object = self.domains
        elif action == "domain.resource.list":
            data = self.resources.get(int(form["DomainID"]), [])
        elif action == "domain.resource.update":
            data = {"ResourceID": int(form["ResourceID"])}
        else:
            data = {}

        return httpx.Response(
            200,
            json={"ERRORARRAY": [], "DATA": data, "ACTION": action},
        )


@pytest.fixture
def linode_api() -> FakeLinodeAPI:
    """Create a fake Linode API."""
    return FakeLinodeAPI()


@pytest.fixture
def http_client(linode_api):
    """Create an HTTP client routed to the fake Linode API."""
    client = httpx.Client(transport=httpx.MockTransport(linode_api.handler))
    yield client
    client.close()


@pytest.fixture
def config(tmp_path) -> Config:
    """Create a configuration keeping state in a temporary directory."""
    return Config(state=StateConfig(directory=str(tmp_path)))
