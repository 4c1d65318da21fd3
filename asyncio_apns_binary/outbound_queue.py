import collections
import logging

logger = logging.getLogger(__name__)


class OutboundQueue:
    """FIFO of encoded packets waiting for a connected gateway"""

    def __init__(self):
        self._packets = collections.deque()

    def __len__(self):
        return len(self._packets)

    def enqueue(self, packet: bytes):
        self._packets.append(packet)

    def is_empty(self) -> bool:
        return not self._packets

    def flush_into(self, connection) -> int:
        # popped packets count as sent, nothing is ever put back
        written = 0
        while self._packets and connection.writable:
            connection.write(self._packets.popleft())
            written += 1
        if written:
            logger.debug("Flushed %d queued packet(s), %d left", written, len(self._packets))
        return written

    def clear(self):
        self._packets.clear()
