import logging

from .apns_protocol import decode_feedback_records
from .channel import Channel
from .errors import TransportError

logger = logging.getLogger(__name__)

PRODUCTION_SERVER_ADDR = 'feedback.push.apple.com'
SANDBOX_SERVER_ADDR = 'feedback.sandbox.push.apple.com'
SERVER_PORT = 2196

RECONNECT_DELAY = 5


class FeedbackChannel(Channel):
    """
    Long-lived feedback connection.

    Emits one ``feedback`` event per :class:`~.apns_protocol.FeedbackRecord`
    read from the stream. When an established connection closes, the same
    connect sequence runs again after ``reconnect_delay`` seconds. A failed
    connect attempt is only reported, it is not retried.
    """
    name = 'feedback'

    def __init__(self, emitter, host: str = PRODUCTION_SERVER_ADDR,
                 port: int = SERVER_PORT, *, reconnect_delay=RECONNECT_DELAY, **kwargs):
        super().__init__(emitter, host, port, **kwargs)
        self.reconnect_delay = reconnect_delay
        self.started = False
        self._buffer = b''
        self._reconnect_handle = None

    def start(self):
        if self.started:
            return
        self.started = True
        self._start_connect()

    def _start_connect(self):
        self._buffer = b''
        return super()._start_connect()

    def connection_ready(self, connection):
        # records may be hours apart
        connection.set_timeout(None)

    def _reconnect(self):
        self._reconnect_handle = None
        logger.debug("[%s] reconnecting", self.name)
        self._start_connect()

    def on_read(self, connection, data):
        if connection is not self.connection:
            return
        records, self._buffer = decode_feedback_records(self._buffer + data)
        for record in records:
            logger.debug("[%s] device %s rejected at %d", self.name, record.device, record.timestamp)
            self.emitter.emit('feedback', record)

    def on_error(self, connection, exc):
        if connection is not self.connection:
            return
        error = TransportError(self.name, exc)
        logger.warning("%s", error)
        self.emitter.emit('error', error)

    def on_timeout(self, connection):
        if connection is not self.connection:
            return
        logger.debug("[%s] idle timeout, resetting", self.name)
        self._release()

    def on_close(self, connection):
        if connection is not self.connection:
            return
        if self._buffer:
            logger.warning("[%s] connection closed with %d byte(s) of an incomplete record",
                           self.name, len(self._buffer))
        self._release()
        logger.debug("[%s] connection closed, reconnecting in %ss", self.name, self.reconnect_delay)
        self._reconnect_handle = self.loop.call_later(self.reconnect_delay, self._reconnect)

    def close(self):
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
        self.started = False
        super().close()


__all__ = ["FeedbackChannel", "PRODUCTION_SERVER_ADDR", "SANDBOX_SERVER_ADDR", "SERVER_PORT"]
