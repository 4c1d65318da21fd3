import asyncio
from collections import namedtuple
from unittest import mock

TOKEN = "c9d4a07c fbbc21d6 ef87a47d 53e16983 1096a5d5 faa15b75 56f59ddd a715dff4"

Attempt = namedtuple('Attempt', ['connection', 'host', 'port', 'future'])


def make_transport():
    transport = mock.MagicMock()
    transport.is_closing.return_value = False
    return transport


async def settle(rounds=10):
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeConnector:
    """Stands in for tls_connect; each attempt waits until the test resolves it"""

    def __init__(self):
        self.attempts = []

    async def __call__(self, connection, host, port, *, cert_file=None, key_file=None, loop=None):
        future = asyncio.get_running_loop().create_future()
        self.attempts.append(Attempt(connection, host, port, future))
        await future

    def succeed(self, index=-1):
        attempt = self.attempts[index]
        transport = make_transport()
        attempt.connection.connection_made(transport)
        attempt.future.set_result(None)
        return transport

    def fail(self, exc, index=-1):
        self.attempts[index].future.set_exception(exc)
