#!/usr/bin/env python3
"""
Exceptions raised by the MegaChess client.

Transport errors come from the websocket connection, protocol errors from
turning frames into messages and back.
"""


class MegaChessError(Exception):
    """Base class for all client errors."""


class TransportError(MegaChessError):
    """The websocket could not be used."""


class TransportOpenError(TransportError):
    """Opening the websocket failed."""


class TransportReadError(TransportError):
    """Reading the next frame failed; the connection is gone."""


class SendError(TransportError):
    """Writing a frame to the websocket failed."""


class MissingCredentialError(MegaChessError):
    """The auth token environment variable is unset or empty."""


class ProtocolError(MegaChessError):
    """A frame or message does not match the wire format."""


class DecodeError(ProtocolError):
    """An inbound frame could not be parsed."""


class EncodeError(ProtocolError):
    """An outbound message could not be serialized."""
