import pytest
import pytest_asyncio

from asyncio_apns_binary import APNsClient

from .support import FakeConnector


@pytest.fixture
def connector():
    return FakeConnector()


@pytest_asyncio.fixture
async def client(connector):
    client = APNsClient("some.crt", "some.key", sandbox=True,
                        connector=connector, reconnect_delay=0.01)
    yield client
    client.close()


@pytest.fixture
def errors(client):
    received = []
    client.on('error', received.append)
    return received
