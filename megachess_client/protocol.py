#!/usr/bin/env python3
"""
Wire format for the MegaChess websocket service.

Every frame is a JSON object ``{"action": <tag>, "data": {...}}``. Empty
fields are left out of outbound frames and read back as empty strings.
"""

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Union

from megachess_client.errors import DecodeError, EncodeError


class Action(str, Enum):
    """Action tags known to the client."""

    CONNECT = "connect"
    ASK_CHALLENGE = "ask_challenge"
    ACCEPT_CHALLENGE = "accept_challenge"
    CHALLENGE = "challenge"
    YOUR_TURN = "your_turn"
    MOVE = "move"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> "Action":
        """
        Map a raw tag to an action, falling back to UNKNOWN.

        :param tag: Action tag as found on the wire
        :type tag: str
        :return: Matching action, or Action.UNKNOWN
        :rtype: Action
        """
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


def _compact(data: Any) -> Dict[str, str]:
    return {f.name: getattr(data, f.name) for f in fields(data) if getattr(data, f.name)}


def _read_fields(cls, raw: Any):
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise DecodeError(f"'data' must be an object, got {type(raw).__name__}")

    values = {}
    for f in fields(cls):
        value = raw.get(f.name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise DecodeError(f"Field '{f.name}' must be a string, got {type(value).__name__}")
        values[f.name] = value
    return cls(**values)


@dataclass
class MessageData:
    """
    Payload of a tagged message. Empty strings stand for absent fields.

    :param auth_token: Credential sent with the handshake
    :type auth_token: str
    :param turn_token: Token authorizing one move
    :type turn_token: str
    :param message: Free text from the server
    :type message: str
    :param username: User being challenged, or the challenger
    :type username: str
    :param board_id: Board the message refers to
    :type board_id: str
    """

    auth_token: str = ""
    turn_token: str = ""
    message: str = ""
    username: str = ""
    board_id: str = ""

    def to_dict(self) -> Dict[str, str]:
        """
        Build the JSON payload, leaving out empty fields.

        :return: Non-empty fields by name
        :rtype: Dict[str, str]
        """
        return _compact(self)


@dataclass
class Message:
    """
    A tagged message, inbound or outbound.

    :param action: Raw action tag
    :type action: str
    :param data: Payload; which fields are set depends on the action
    :type data: MessageData
    """

    action: str = ""
    data: MessageData = field(default_factory=MessageData)

    @property
    def kind(self) -> Action:
        """Closed action kind for routing."""
        return Action.from_tag(self.action)

    def to_dict(self) -> Dict[str, Any]:
        """Build the JSON frame body, leaving out an empty tag or payload."""
        payload: Dict[str, Any] = {}
        if self.action:
            payload["action"] = self.action
        data = self.data.to_dict()
        if data:
            payload["data"] = data
        return payload


@dataclass
class MoveData:
    """
    Payload of a move. Coordinates are decimal strings.

    :param turn_token: Token the server issued for this turn
    :type turn_token: str
    :param board_id: Board to move on
    :type board_id: str
    :param from_col: Source column
    :type from_col: str
    :param to_col: Destination column
    :type to_col: str
    :param from_row: Source row
    :type from_row: str
    :param to_row: Destination row
    :type to_row: str
    """

    turn_token: str = ""
    board_id: str = ""
    from_col: str = ""
    to_col: str = ""
    from_row: str = ""
    to_row: str = ""

    def to_dict(self) -> Dict[str, str]:
        """
        Build the JSON payload. turn_token is always present, other empty
        fields are left out.

        :return: Fields by name, in declaration order
        :rtype: Dict[str, str]
        """
        data = _compact(self)
        data.setdefault("turn_token", "")
        return {f.name: data[f.name] for f in fields(self) if f.name in data}


@dataclass
class Move:
    """
    An outbound move. Coordinates travel as decimal strings.

    :param data: Turn token, board id and the four coordinates
    :type data: MoveData
    """

    data: MoveData = field(default_factory=MoveData)
    action: str = Action.MOVE.value

    def to_dict(self) -> Dict[str, Any]:
        """Build the JSON frame body."""
        return {"action": self.action, "data": self.data.to_dict()}


def encode_message(message: Union[Message, Move]) -> str:
    """
    Serialize a message to a JSON text frame.

    :param message: Message to serialize
    :type message: Union[Message, Move]
    :return: JSON text frame
    :rtype: str
    :raises EncodeError: If the message holds values JSON cannot represent
    """
    try:
        return json.dumps(message.to_dict())
    except (TypeError, ValueError, AttributeError) as e:
        raise EncodeError(f"Cannot encode {type(message).__name__}: {e}") from e


def _load_frame(frame: Union[str, bytes]) -> Dict[str, Any]:
    if isinstance(frame, (bytes, bytearray)):
        try:
            frame = frame.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Frame is not valid UTF-8: {e}") from e

    try:
        payload = json.loads(frame)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid JSON frame: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"Frame must be a JSON object, got {type(payload).__name__}")

    action = payload.get("action")
    if action is not None and not isinstance(action, str):
        raise DecodeError(f"'action' must be a string, got {type(action).__name__}")
    return payload


def decode_message(frame: Union[str, bytes]) -> Message:
    """
    Parse an inbound frame.

    Missing fields decode to empty strings; fields the client does not know
    about are ignored.

    :param frame: Text or UTF-8 bytes received from the websocket
    :type frame: Union[str, bytes]
    :return: Decoded message
    :rtype: Message
    :raises DecodeError: If the frame is not a well-formed message
    """
    payload = _load_frame(frame)
    return Message(action=payload.get("action") or "",
                   data=_read_fields(MessageData, payload.get("data")))


def decode_move(frame: Union[str, bytes]) -> Move:
    """
    Parse a move frame.

    :param frame: Text or UTF-8 bytes holding a move
    :type frame: Union[str, bytes]
    :return: Decoded move
    :rtype: Move
    :raises DecodeError: If the frame is not a well-formed move
    """
    payload = _load_frame(frame)
    action = payload.get("action") or Action.MOVE.value
    if action != Action.MOVE.value:
        raise DecodeError(f"Expected a '{Action.MOVE.value}' frame, got '{action}'")
    return Move(data=_read_fields(MoveData, payload.get("data")))
