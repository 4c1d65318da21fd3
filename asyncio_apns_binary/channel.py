import asyncio
import enum
import logging

from .connection import Connection, tls_connect, DEFAULT_TIMEOUT
from .errors import ConnectError

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10


class ChannelState(enum.Enum):
    disconnected = "disconnected"
    connecting = "connecting"
    connected = "connected"


def _describe(exc):
    if isinstance(exc, asyncio.TimeoutError):
        return "Connect timeout"
    return str(exc) or type(exc).__name__


class Channel:
    """
    Lifecycle shared by the gateway and feedback channels: at most one
    connection at a time, owned by the channel and released explicitly.

    Subclasses implement ``connection_ready`` and the ``on_*`` transport
    callbacks of :class:`Connection`.
    """
    name = None

    def __init__(self, emitter, host: str, port: int, *,
                 cert_file=None, key_file=None, loop=None,
                 connector=tls_connect, timeout=DEFAULT_TIMEOUT,
                 connect_timeout=DEFAULT_CONNECT_TIMEOUT):
        self.emitter = emitter
        self.host = host
        self.port = port
        self.cert_file = cert_file
        self.key_file = key_file
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.state = ChannelState.disconnected
        self.connection = None
        self._loop = loop
        self._connector = connector
        self._connect_task = None
        self._last_connect_error = None

    @property
    def loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def connected(self) -> bool:
        return self.state is ChannelState.connected

    def _start_connect(self):
        logger.debug("[%s] connecting to %s:%d", self.name, self.host, self.port)
        connection = Connection(self, loop=self.loop, timeout=self.timeout)
        self.state = ChannelState.connecting
        self.connection = connection
        self._connect_task = self.loop.create_task(self._connect(connection))
        return self._connect_task

    async def _connect(self, connection):
        try:
            await asyncio.wait_for(
                self._connector(connection, self.host, self.port,
                                cert_file=self.cert_file, key_file=self.key_file,
                                loop=self.loop),
                self.connect_timeout)
        except Exception as exc:
            if connection is self.connection:
                self._release()
                self._connect_failed(exc)
            return
        if connection is not self.connection:
            # released while the handshake was in flight
            connection.close()
            return
        self._connect_task = None
        self.state = ChannelState.connected
        logger.debug("[%s] connected to %s:%d", self.name, self.host, self.port)
        self.connection_ready(connection)

    def _connect_failed(self, exc):
        error = ConnectError(self.name, _describe(exc))
        self._last_connect_error = error
        network = isinstance(exc, (OSError, asyncio.TimeoutError))
        logger.warning("%s", error, exc_info=None if network else exc)
        self.emitter.emit('error', error)

    def connection_ready(self, connection):
        raise NotImplementedError

    async def connect(self):
        if self.connected:
            return
        if self._connect_task is None:
            self._last_connect_error = None
            self._start_connect()
        await self._connect_task
        if not self.connected:
            raise self._last_connect_error or ConnectError(self.name, "Not connected")

    def _release(self):
        connection = self.connection
        self.connection = None
        self._connect_task = None
        self.state = ChannelState.disconnected
        if connection is not None:
            connection.close()

    def close(self):
        if self._connect_task is not None:
            self._connect_task.cancel()
        self._release()

    def on_read(self, connection, data):
        pass

    def on_drain(self, connection):
        pass
