from .apns_protocol import (FeedbackRecord, encode_notification,
                            decode_feedback_records, MAX_PAYLOAD_LENGTH)
from .channel import ChannelState
from .client import connect, APNsClient
from .errors import (APNsError, PayloadTooLongError, InvalidTokenError,
                     ChannelError, ConnectError, TransportError, IdleTimeoutError)
from .payload import Payload

__all__ = ['connect', 'APNsClient', 'ChannelState', 'FeedbackRecord',
           'encode_notification', 'decode_feedback_records', 'MAX_PAYLOAD_LENGTH',
           'APNsError', 'PayloadTooLongError', 'InvalidTokenError', 'ChannelError',
           'ConnectError', 'TransportError', 'IdleTimeoutError', 'Payload']
