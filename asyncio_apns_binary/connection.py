import asyncio
import logging
import ssl

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


class Connection(asyncio.Protocol):
    """
    One TLS stream, owned by a channel.

    Transport events are forwarded to ``handler`` as
    ``on_read(connection, data)``, ``on_drain(connection)``,
    ``on_error(connection, exc)``, ``on_timeout(connection)`` and
    ``on_close(connection)``; handlers compare the connection with the one
    they currently own and ignore events from released connections.
    """
    def __init__(self, handler, *, loop, timeout=DEFAULT_TIMEOUT):
        self.handler = handler
        self.transport = None
        self.timeout = timeout
        self._loop = loop
        self._paused = False
        self._drain_handle = None
        self._timeout_handle = None

    @property
    def connected(self) -> bool:
        return self.transport is not None

    @property
    def writable(self) -> bool:
        return self.transport is not None and not self.transport.is_closing()

    def connection_made(self, transport):
        self.transport = transport
        # pause_writing()/resume_writing() then track every byte left in the
        # transport buffer, which is what drain means here
        transport.set_write_buffer_limits(high=0)
        self._restart_timer()

    def data_received(self, data):
        self._restart_timer()
        self.handler.on_read(self, data)

    def connection_lost(self, exc):
        self._cancel_handles()
        self.transport = None
        try:
            if exc is not None:
                self.handler.on_error(self, exc)
        finally:
            self.handler.on_close(self)

    def pause_writing(self):
        self._paused = True

    def resume_writing(self):
        self._paused = False
        self._schedule_drain()

    def write(self, data: bytes):
        self.transport.write(data)
        self._restart_timer()
        if not self._paused:
            self._schedule_drain()

    def set_timeout(self, timeout):
        """``None`` or 0 disables the idle timeout"""
        self.timeout = timeout
        self._restart_timer()

    def close(self):
        self._cancel_handles()
        if self.transport is not None:
            self.transport.close()

    def _schedule_drain(self):
        if self._drain_handle is None:
            self._drain_handle = self._loop.call_soon(self._drained)

    def _drained(self):
        self._drain_handle = None
        if self.transport is not None and not self._paused:
            self.handler.on_drain(self)

    def _restart_timer(self):
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        if self.timeout and self.transport is not None:
            self._timeout_handle = self._loop.call_later(self.timeout, self._timed_out)

    def _timed_out(self):
        self._timeout_handle = None
        self.handler.on_timeout(self)

    def _cancel_handles(self):
        for handle in (self._drain_handle, self._timeout_handle):
            if handle is not None:
                handle.cancel()
        self._drain_handle = None
        self._timeout_handle = None


async def tls_connect(connection: Connection, host: str, port: int,
                      *, cert_file=None, key_file=None, loop=None):
    """
    Default transport: opens a TLS connection with ``connection`` as its
    protocol. Raises ``OSError`` (``ssl.SSLError`` included) on failure.
    """
    if loop is None:
        loop = asyncio.get_running_loop()
    ssl_context = ssl.create_default_context()
    if cert_file and key_file:
        ssl_context.load_cert_chain(cert_file, key_file)
    logger.debug("Connecting to %s:%d", host, port)
    await loop.create_connection(lambda: connection, host=host, port=port, ssl=ssl_context)


__all__ = ["Connection", "tls_connect", "DEFAULT_TIMEOUT"]
