#!/usr/bin/env python3
"""
Connection management for the MegaChess websocket service.

Owns the one live websocket, sends the authentication handshake and
replaces the socket when it fails.
"""

import asyncio
import os
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

# Type alias for websocket connection
if TYPE_CHECKING:
    WebSocketConnection = Any

import websockets
from rich.console import Console
from websockets.exceptions import ConnectionClosed, WebSocketException

from megachess_client.errors import (MegaChessError, MissingCredentialError, SendError,
                                     TransportOpenError, TransportReadError)
from megachess_client.protocol import Action, Message, MessageData, Move, encode_message

DEFAULT_URL = "wss://mega-chess.herokuapp.com/service"
AUTH_TOKEN_ENV = "MEGACHESS_AUTH_TOKEN"
DEFAULT_MAX_RECONNECT_ATTEMPTS = 1

console = Console()


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    TERMINATED = "terminated"


class ConnectionManager:
    """
    Keeps exactly one websocket open to the MegaChess server.

    :param url: Websocket URL of the service
    :type url: str
    :param token_env: Environment variable holding the auth token
    :type token_env: str
    :param max_reconnect_attempts: Connect attempts made after a failure before giving up
    :type max_reconnect_attempts: int
    :param reconnect_delay: Seconds to wait between two failed reconnect attempts
    :type reconnect_delay: float
    """

    def __init__(self, url: str = DEFAULT_URL, token_env: str = AUTH_TOKEN_ENV,
                 max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
                 reconnect_delay: float = 0.0):
        self.url = url
        self.token_env = token_env
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_delay = reconnect_delay
        self.websocket: Optional['WebSocketConnection'] = None
        self.state = ConnectionState.DISCONNECTED

    async def connect(self) -> None:
        """
        Open a websocket and authenticate.

        The socket is opened before the credential is looked up, so a missing
        token still leaves an open connection behind, with the manager left in
        the CONNECTING state until it is closed.

        :raises TransportOpenError: If the websocket cannot be opened
        :raises MissingCredentialError: If the auth token is unset or empty
        :raises SendError: If the handshake cannot be written
        """
        self.state = ConnectionState.CONNECTING
        try:
            self.websocket = await websockets.connect(self.url)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self.websocket = None
            self.state = ConnectionState.DISCONNECTED
            raise TransportOpenError(f"Cannot connect to {self.url}: {e}") from e

        auth_token = os.environ.get(self.token_env, "")
        if not auth_token:
            # Socket open but unauthenticated
            self.state = ConnectionState.CONNECTING
            raise MissingCredentialError(f"{self.token_env} env variable not set")

        await self.send(Message(action=Action.CONNECT.value, data=MessageData(auth_token=auth_token)))
        self.state = ConnectionState.CONNECTED
        console.print("[green]✓ Connected to MegaChess![/green]")

    async def receive(self) -> Union[str, bytes]:
        """
        Wait for the next frame.

        :return: Raw frame
        :rtype: Union[str, bytes]
        :raises TransportReadError: If the connection is closed or broken
        """
        if self.websocket is None:
            raise TransportReadError("Not connected")
        try:
            return await self.websocket.recv()
        except (OSError, ConnectionClosed) as e:
            raise TransportReadError(str(e) or type(e).__name__) from e

    async def send(self, message: Union[Message, Move]) -> None:
        """
        Send one message as a text frame.

        :param message: Message to send
        :type message: Union[Message, Move]
        :raises EncodeError: If the message cannot be serialized
        :raises SendError: If the frame cannot be written
        """
        frame = encode_message(message)
        if self.websocket is None:
            raise SendError("Not connected")
        try:
            await self.websocket.send(frame)
        except (OSError, ConnectionClosed) as e:
            raise SendError(str(e) or type(e).__name__) from e

    async def reconnect(self) -> bool:
        """
        Replace a failed websocket with a new one.

        Makes at most ``max_reconnect_attempts`` connect attempts, with no
        backoff. Once they are used up the manager is terminated.

        :return: True if a new connection was established
        :rtype: bool
        """
        await self.close()

        for attempt in range(1, self.max_reconnect_attempts + 1):
            console.print(f"[yellow]Attempting to re-connect... "
                          f"({attempt}/{self.max_reconnect_attempts})[/yellow]")
            try:
                await self.connect()
                return True
            except MegaChessError as e:
                console.print(f"[yellow]⚠ Reconnection failed:[/yellow] {e}")
                await self.close()
                if attempt < self.max_reconnect_attempts and self.reconnect_delay > 0:
                    await asyncio.sleep(self.reconnect_delay)

        self.state = ConnectionState.TERMINATED
        console.print("[red]✗ Failed to re-connect to websocket[/red]")
        return False

    async def close(self) -> None:
        """Close the live websocket, if any."""
        websocket, self.websocket = self.websocket, None
        if websocket is not None:
            await websocket.close()
        if self.state is not ConnectionState.TERMINATED:
            self.state = ConnectionState.DISCONNECTED
