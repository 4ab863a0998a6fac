"""
Wear Protocol Errors

Typed failures raised inside the protocol core. Handler boundaries catch
and log them; none of them is allowed to reach the transport callback.
"""


class WearProtocolError(Exception):
    """Base class for protocol core errors"""


class DecodeError(WearProtocolError):
    """Inbound payload is malformed, truncated or missing a required field"""


class InvalidArgumentError(WearProtocolError):
    """A browse type or play context requires a context id that is absent or invalid"""


class NotFoundError(WearProtocolError):
    """A context id does not resolve (e.g. unknown playlist)"""


class ControllerUnavailableError(WearProtocolError):
    """The remote media controller could not be built"""


class TransportError(WearProtocolError):
    """Sending a message or data item failed"""


class BrowseTimeoutError(TransportError):
    """No browse response arrived within the client-side timeout"""
