class APNsError(Exception):
    pass


class PayloadTooLongError(APNsError):
    def __init__(self, length, limit):
        super().__init__()
        self.length = length
        self.limit = limit

    def __repr__(self):
        return "PayloadTooLongError(length={}, limit={})".format(
            self.length, self.limit)

    def __str__(self):
        return "Too long message ({})".format(self.length)


class InvalidTokenError(APNsError, ValueError):
    def __init__(self, token):
        super().__init__()
        self.token = token

    def __repr__(self):
        return "InvalidTokenError(token={!r})".format(self.token)

    def __str__(self):
        return "Invalid device token {!r}".format(self.token)


class ChannelError(APNsError):
    """
    Failure of the gateway or feedback connection, delivered through
    the ``error`` event rather than raised
    """
    def __init__(self, channel, cause):
        super().__init__()
        self.channel = channel
        self.cause = cause

    def __repr__(self):
        return "{}(channel={!r}, cause={!r})".format(
            type(self).__name__, self.channel, self.cause)

    def __str__(self):
        return "{}: {}".format(self.channel, self.cause)


class ConnectError(ChannelError):
    pass


class TransportError(ChannelError):
    pass


class IdleTimeoutError(ChannelError):
    def __init__(self, channel, cause="Timeout"):
        super().__init__(channel, cause)
