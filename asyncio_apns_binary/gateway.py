import logging

from .channel import Channel, ChannelState
from .errors import IdleTimeoutError, TransportError
from .outbound_queue import OutboundQueue

logger = logging.getLogger(__name__)

PRODUCTION_SERVER_ADDR = 'gateway.push.apple.com'
SANDBOX_SERVER_ADDR = 'gateway.sandbox.push.apple.com'
SERVER_PORT = 2195


class GatewayChannel(Channel):
    """
    Delivery connection. Connects lazily on the first ``send``, queues
    packets while disconnected and emits ``drain`` once the queue is empty
    and the transport has flushed everything written to it.

    Failures never schedule a reconnect; queued packets wait for the next
    ``send``.
    """
    name = 'gateway'

    def __init__(self, emitter, host: str = PRODUCTION_SERVER_ADDR,
                 port: int = SERVER_PORT, **kwargs):
        super().__init__(emitter, host, port, **kwargs)
        self.queue = OutboundQueue()

    def send(self, packet: bytes):
        if self.connected and self.connection.writable:
            self.connection.write(packet)
            return
        self.queue.enqueue(packet)
        if self.state is ChannelState.disconnected:
            self._start_connect()

    def connection_ready(self, connection):
        self.queue.flush_into(connection)

    def on_drain(self, connection):
        if connection is not self.connection:
            return
        if self.queue.is_empty():
            self.emitter.emit('drain')

    def on_error(self, connection, exc):
        if connection is not self.connection:
            return
        error = TransportError(self.name, exc)
        logger.warning("%s", error)
        self._release()
        self.emitter.emit('error', error)

    def on_timeout(self, connection):
        if connection is not self.connection:
            return
        error = IdleTimeoutError(self.name)
        logger.info("%s", error)
        self._release()
        self.emitter.emit('error', error)

    def on_close(self, connection):
        if connection is not self.connection:
            return
        logger.debug("[%s] connection closed by peer", self.name)
        self._release()

    def close(self):
        super().close()
        self.queue.clear()


__all__ = ["GatewayChannel", "PRODUCTION_SERVER_ADDR", "SANDBOX_SERVER_ADDR", "SERVER_PORT"]
