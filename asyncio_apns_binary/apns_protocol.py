"""
APNs binary interface framing: gateway notification packets and
feedback service records

https://developer.apple.com/library/ios/
documentation/NetworkingInternet/Conceptual/RemoteNotificationsPG/Chapters/
CommunicatingWIthAPS.html#//apple_ref/doc/uid/TP40008194-CH101-SW4
"""
import binascii
import datetime
import re
import struct
from collections import namedtuple
from typing import List, Optional, Tuple

from .errors import InvalidTokenError, PayloadTooLongError
from .payload import Payload

COMMAND_SIMPLE_NOTIFICATION = 0

TOKEN_SIZE = 32

MAX_PAYLOAD_LENGTH = 256

NOTIFICATION_HEADER_FORMAT = "!BH{}sH".format(TOKEN_SIZE)

FEEDBACK_HEADER_FORMAT = "!LH"
FEEDBACK_HEADER_SIZE = struct.calcsize(FEEDBACK_HEADER_FORMAT)

_WHITESPACE = re.compile(r'\s+')


class FeedbackRecord(namedtuple('FeedbackRecord', ['timestamp', 'token'])):
    __slots__ = ()

    @property
    def device(self) -> str:
        return binascii.hexlify(self.token).decode('ascii')

    @property
    def rejected_at(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.timestamp, tz=datetime.timezone.utc)


def token_format(token_length):
    return '{}s'.format(token_length)


def unhexlify_token(token_hex: str) -> bytes:
    stripped = _WHITESPACE.sub('', token_hex)
    try:
        token = binascii.unhexlify(stripped)
    except (binascii.Error, ValueError):
        raise InvalidTokenError(token_hex) from None
    if len(token) != TOKEN_SIZE:
        raise InvalidTokenError(token_hex)
    return token


def encode_notification(token_hex: str, alert: str, badge: int = 0,
                        sound: Optional[str] = None,
                        custom: Optional[dict] = None) -> bytes:
    # |COMMAND|TOKEN-LEN|{token:32}|PAYLOAD-LEN|{payload}
    payload = Payload(alert, badge=badge, sound=sound, custom=custom).encode()
    if len(payload) > MAX_PAYLOAD_LENGTH:
        raise PayloadTooLongError(len(payload), MAX_PAYLOAD_LENGTH)
    token = unhexlify_token(token_hex)
    header = struct.pack(NOTIFICATION_HEADER_FORMAT, COMMAND_SIMPLE_NOTIFICATION,
                         TOKEN_SIZE, token, len(payload))
    return header + payload


def pack_feedback_record(timestamp: int, token: bytes) -> bytes:
    return struct.pack(FEEDBACK_HEADER_FORMAT + token_format(len(token)),
                       timestamp, len(token), token)


def decode_feedback_records(buffer: bytes) -> Tuple[List[FeedbackRecord], bytes]:
    """
    Peels complete feedback records off the front of ``buffer``.

    Returns the decoded records and the bytes of a trailing partial
    record (possibly empty), which must be prefixed to the next read.
    """
    records = []
    offset = 0
    while len(buffer) - offset >= FEEDBACK_HEADER_SIZE:
        timestamp, token_length = struct.unpack_from(
            FEEDBACK_HEADER_FORMAT, buffer, offset)
        end = offset + FEEDBACK_HEADER_SIZE + token_length
        if end > len(buffer):
            break
        token, = struct.unpack_from(token_format(token_length), buffer,
                                    offset + FEEDBACK_HEADER_SIZE)
        records.append(FeedbackRecord(timestamp, token))
        offset = end
    return records, bytes(buffer[offset:])
