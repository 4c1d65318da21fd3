import asyncio
import json

import pytest

from asyncio_apns_binary import APNsClient, ConnectError, InvalidTokenError, connect
from asyncio_apns_binary import feedback, gateway

from .support import FakeConnector, TOKEN, settle


def test_initial():
    client = APNsClient("some.crt", "some.key")
    assert not client.connected
    assert client.gateway.host == gateway.PRODUCTION_SERVER_ADDR
    assert client.feedback.host == feedback.PRODUCTION_SERVER_ADDR
    assert client.gateway.cert_file == "some.crt"
    assert client.gateway.key_file == "some.key"


def test_sandbox_hosts():
    client = APNsClient("some.crt", "some.key", sandbox=True)
    assert (client.gateway.host, client.gateway.port) == (gateway.SANDBOX_SERVER_ADDR, 2195)
    assert (client.feedback.host, client.feedback.port) == (feedback.SANDBOX_SERVER_ADDR, 2196)


def test_custom_hosts():
    client = APNsClient("some.crt", "some.key", gateway_addr="127.0.0.1", gateway_port=8443,
                        feedback_addr="127.0.0.1", feedback_port=8444)
    assert (client.gateway.host, client.gateway.port) == ("127.0.0.1", 8443)
    assert (client.feedback.host, client.feedback.port) == ("127.0.0.1", 8444)


@pytest.mark.asyncio
async def test_connect():
    connector = FakeConnector()
    task = asyncio.ensure_future(connect("some.crt", "some.key", connector=connector))
    await settle()
    connector.succeed()
    client = await task
    assert client.connected
    client.close()
    assert not client.connected


@pytest.mark.asyncio
async def test_connect_failure_raises():
    connector = FakeConnector()
    task = asyncio.ensure_future(connect("some.crt", "some.key", connector=connector))
    await settle()
    connector.fail(ConnectionRefusedError("Connection refused"))
    with pytest.raises(ConnectError) as excinfo:
        await task
    assert str(excinfo.value) == "gateway: Connection refused"


@pytest.mark.asyncio
async def test_connect_twice(client, connector):
    first = asyncio.ensure_future(client.connect())
    second = asyncio.ensure_future(client.connect())
    await settle()
    connector.succeed()
    await first
    await second
    assert len(connector.attempts) == 1


@pytest.mark.asyncio
async def test_connect_when_connected(client, connector):
    task = asyncio.ensure_future(client.connect())
    await settle()
    connector.succeed()
    await task
    await client.connect()
    assert len(connector.attempts) == 1


@pytest.mark.asyncio
async def test_custom_fields(client, connector):
    client.send(TOKEN, "Hello", sound="default", url="https://example.com", id=7)
    await settle()
    transport = connector.succeed()
    await settle()
    packet = transport.write.call_args[0][0]
    assert json.loads(packet[37:].decode()) == {
        "aps": {"alert": "Hello", "badge": 0, "sound": "default"},
        "custom": {"url": "https://example.com", "id": 7}}


@pytest.mark.asyncio
async def test_invalid_token(client, connector):
    with pytest.raises(InvalidTokenError):
        client.send("abcde", "Hello")
    await settle()
    assert not connector.attempts


@pytest.mark.asyncio
async def test_send_future_awaitable(client, connector):
    future = client.send(TOKEN, "Hello")
    await settle()
    connector.succeed()
    assert await asyncio.wait_for(future, 1) is None


@pytest.mark.asyncio
async def test_async_context_manager():
    connector = FakeConnector()
    async with APNsClient("some.crt", "some.key", connector=connector,
                          reconnect_delay=0.01) as client:
        client.start_feedback()
        await settle()
        connector.succeed()
        await settle()
        client.feedback.connection.connection_lost(None)
    await asyncio.sleep(0.05)
    assert len(connector.attempts) == 1
    assert not client.feedback.connected


@pytest.mark.asyncio
async def test_send_resolves_when_drain_observer_raises(client, connector):
    loop = asyncio.get_running_loop()
    failures = []
    loop.set_exception_handler(lambda loop, context: failures.append(context.get('exception')))
    try:
        def broken():
            raise RuntimeError("observer failed")

        client.on('drain', broken)
        future = client.send(TOKEN, "Hello")
        await settle()
        connector.succeed()
        await settle()
    finally:
        loop.set_exception_handler(None)
    assert future.done()
    assert future.result() is None
    assert [type(exc) for exc in failures] == [RuntimeError]
    assert client.listeners('drain') == [broken]


@pytest.mark.asyncio
async def test_close_unregisters_pending_sends(client, connector):
    first = client.send(TOKEN, "first")
    second = client.send(TOKEN, "second")
    assert len(client.listeners('drain')) == 2
    client.close()
    assert client.listeners('drain') == []
    assert first.cancelled() and second.cancelled()
