"""
Pytest configuration and shared fixtures.
"""

import pytest
from sf_fakes import FakeTransport, describe_payload, token_payload

from sfrest.config import SFConfig


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def config():
    return SFConfig(
        username="user@example.com",
        password="pw-and-token",
        client_id="cid",
        client_secret="csecret",
    )


@pytest.fixture
def client(fake_transport, config):
    """A client that has logged in and loaded the catalog; recorded calls are reset."""
    from sfrest.client import SFRestClient

    fake_transport.queue(200, token_payload("tok1"))
    fake_transport.queue(200, describe_payload(), headers={"Sforce-Limit-Info": "api-usage=1/15000"})
    api = SFRestClient(config=config, transport=fake_transport)
    fake_transport.calls.clear()
    return api
