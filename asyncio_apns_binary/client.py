import asyncio
import logging

from . import feedback, gateway
from .apns_protocol import encode_notification
from .channel import DEFAULT_CONNECT_TIMEOUT
from .connection import DEFAULT_TIMEOUT, tls_connect
from .events import EventEmitter
from .feedback import FeedbackChannel, RECONNECT_DELAY
from .gateway import GatewayChannel

logger = logging.getLogger(__name__)


async def connect(cert_file: str, key_file: str, *, sandbox=False, loop=None, **kwargs):
    client = APNsClient(cert_file, key_file, sandbox=sandbox, loop=loop, **kwargs)
    await client.connect()
    return client


class APNsClient(EventEmitter):
    """
    Client for the APNs binary interface.

    Events:

    * ``error(exc)`` -- a :class:`~.errors.ChannelError` from either channel
    * ``drain()`` -- everything passed to :meth:`send` has been written
    * ``feedback(record)`` -- a :class:`~.apns_protocol.FeedbackRecord`,
      delivered once the feedback channel has been started
    """
    def __init__(self, cert_file: str, key_file: str, *, sandbox=False, loop=None,
                 gateway_addr=None, gateway_port=gateway.SERVER_PORT,
                 feedback_addr=None, feedback_port=feedback.SERVER_PORT,
                 timeout=DEFAULT_TIMEOUT, connect_timeout=DEFAULT_CONNECT_TIMEOUT,
                 reconnect_delay=RECONNECT_DELAY, connector=tls_connect):
        super().__init__()
        self.cert_file = cert_file
        self.key_file = key_file
        self.sandbox = sandbox
        self._loop = loop
        if gateway_addr is None:
            gateway_addr = gateway.SANDBOX_SERVER_ADDR if sandbox else gateway.PRODUCTION_SERVER_ADDR
        if feedback_addr is None:
            feedback_addr = feedback.SANDBOX_SERVER_ADDR if sandbox else feedback.PRODUCTION_SERVER_ADDR
        common = dict(cert_file=cert_file, key_file=key_file, loop=loop,
                      connector=connector, connect_timeout=connect_timeout)
        self.gateway = GatewayChannel(self, gateway_addr, gateway_port,
                                      timeout=timeout, **common)
        self.feedback = FeedbackChannel(self, feedback_addr, feedback_port,
                                        reconnect_delay=reconnect_delay, **common)
        self._pending_sends = {}  # future -> its drain handler

    @property
    def loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def connected(self) -> bool:
        return self.gateway.connected

    async def connect(self):
        await self.gateway.connect()

    def send(self, token: str, alert: str, *, badge: int = 0, sound: str = None,
             **custom) -> asyncio.Future:
        """
        Queues ``alert`` for the device ``token`` (64 hex characters,
        whitespace ignored). Any extra keyword arguments end up under the
        payload's ``custom`` key.

        Raises :class:`~.errors.PayloadTooLongError` or
        :class:`~.errors.InvalidTokenError` before anything is queued.
        Returns a future resolved with ``None`` on the next ``drain``;
        later failures are only reported through the ``error`` event.
        """
        packet = encode_notification(token, alert, badge=badge, sound=sound, custom=custom)
        logger.debug("[%s] <<< %d byte packet", token, len(packet))

        future = self.loop.create_future()

        def on_drain():
            self._pending_sends.pop(future, None)
            if not future.done():
                future.set_result(None)

        self._pending_sends[future] = self.once('drain', on_drain)
        self.gateway.send(packet)
        return future

    def start_feedback(self):
        self.feedback.start()

    def subscribe_feedback(self, handler):
        self.on('feedback', handler)
        self.start_feedback()
        return handler

    def close(self):
        self.gateway.close()
        self.feedback.close()
        while self._pending_sends:
            future, on_drain = self._pending_sends.popitem()
            self.remove_listener('drain', on_drain)
            future.cancel()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()


__all__ = ["connect", "APNsClient"]
