"""Shared fixtures: a fake HTTP probe and agents wired to it."""

import pytest

from interp import Agent, InMemoryCredentialStore, InterpolationConfig
from interp.environment import create_environment
from interp.errors import ProbeError
from interp.extensions.filters import set_extension_logger
from interp.extensions.http import HttpProbe, ProbeResponse


class FakeProbe(HttpProbe):
    """Answers HEAD requests from a routing table and records every call.

    Unknown URLs answer 200. A route may also be an exception to raise.
    """

    def __init__(self, routes: dict[str, ProbeResponse | Exception] | None = None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []

    def head(self, url: str) -> ProbeResponse:
        self.calls.append(url)
        outcome = self.routes.get(url, ProbeResponse(200))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def redirect(location: str | None, status: int = 302) -> ProbeResponse:
    headers = {"Location": location} if location is not None else {}
    return ProbeResponse(status, headers)


@pytest.fixture(autouse=True)
def _reset_extension_logger():
    yield
    set_extension_logger(None)


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore({"agent-1": {"api_key": "s3cret", "api-key": "dashed"}})


@pytest.fixture
def make_agent(probe, store):
    """Build an agent whose templates use the fake probe."""
    def _make(options=None, config: InterpolationConfig | None = None, **kwargs) -> Agent:
        kwargs.setdefault("id", "agent-1")
        kwargs.setdefault("credentials", store)
        kwargs.setdefault("environment", create_environment(config, probe))
        return Agent("test-agent", options, **kwargs)
    return _make
