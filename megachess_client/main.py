#!/usr/bin/env python3
"""
MegaChess client.

Connects to the MegaChess websocket service, accepts every challenge it is
offered and answers each turn with a move from the injected strategy.
"""

import argparse
import asyncio
import importlib.util
import sys
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from megachess_client.connection import (AUTH_TOKEN_ENV, DEFAULT_MAX_RECONNECT_ATTEMPTS, DEFAULT_URL,
                                         ConnectionManager)
from megachess_client.errors import (DecodeError, EncodeError, MissingCredentialError, SendError,
                                     TransportOpenError, TransportReadError)
from megachess_client.protocol import (Action, Message, MessageData, Move, MoveData, decode_message,
                                       encode_message)
from megachess_client.strategy_base import MAX_OFFSET, MIN_OFFSET, StrategyBase

console = Console()


class MegaChessClient:
    """
    Receive loop and message dispatch for a MegaChess bot.

    Everything runs in one task: each frame is decoded and handled, including
    any reply, before the next one is read.

    :param connection: Connection to the server
    :type connection: ConnectionManager
    :param strategy: Strategy that picks move coordinates
    :type strategy: StrategyBase
    """

    def __init__(self, connection: ConnectionManager, strategy: StrategyBase):
        self.connection = connection
        self.strategy = strategy
        self.move_count = 0

    async def run(self, challenge_username: Optional[str] = None) -> int:
        """
        Connect, optionally challenge a user, then serve until the connection is lost for good.

        :param challenge_username: Issue a challenge after connecting; "" prompts for the name
        :type challenge_username: Optional[str]
        :return: Process exit status
        :rtype: int
        """
        console.print("[bold green]♟ MegaChess client started[/bold green]")
        console.print(f"[cyan]Server:[/cyan] {self.connection.url}")

        try:
            await self.connection.connect()
        except (TransportOpenError, MissingCredentialError, SendError) as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            await self.connection.close()
            return 1

        try:
            if challenge_username is not None:
                try:
                    await self.issue_challenge(challenge_username or None)
                except (EncodeError, SendError) as e:
                    console.print(f"[red]✗ Could not send challenge:[/red] {e}")

            await self.receive_loop()
        finally:
            await self.connection.close()
        return 1

    async def receive_loop(self) -> None:
        """
        Read and dispatch frames until reconnecting fails.

        Decode and encode errors only drop the frame at hand. A read or send
        failure hands over to the connection's reconnect policy; the loop
        ends when that policy gives up.
        """
        while True:
            try:
                frame = await self.connection.receive()
            except TransportReadError as e:
                console.print(f"[red]✗ Error while reading:[/red] {e}")
                if not await self.connection.reconnect():
                    return
                continue

            try:
                message = decode_message(frame)
            except DecodeError as e:
                console.print(f"[yellow]⚠ Dropping frame:[/yellow] {e}")
                continue

            try:
                await self.route(message)
            except EncodeError as e:
                console.print(f"[yellow]⚠ Dropping reply to '{message.action}':[/yellow] {e}")
            except SendError as e:
                console.print(f"[red]✗ Error while sending:[/red] {e}")
                if not await self.connection.reconnect():
                    return

    async def route(self, message: Message) -> None:
        """
        Dispatch a decoded message on its action.

        :param message: Inbound message
        :type message: Message
        """
        kind = message.kind
        console.print(f"[dim]Received action:[/dim] {message.action or '<none>'}")

        if kind is Action.ASK_CHALLENGE:
            await self.accept_challenge(message.data.board_id)
        elif kind is Action.YOUR_TURN:
            await self.submit_random_move(message.data.board_id, message.data.turn_token)
        elif kind is Action.UNKNOWN:
            console.print(f"[dim]Ignoring unknown action '{message.action}'[/dim]")
        else:
            # Known tags the server never sends to clients
            console.print(f"[dim]Ignoring action '{message.action}'[/dim]")

    async def accept_challenge(self, board_id: str) -> None:
        """
        Accept a challenge. No reply is awaited.

        :param board_id: Board the challenge was issued for
        :type board_id: str
        """
        await self.connection.send(Message(action=Action.ACCEPT_CHALLENGE.value,
                                           data=MessageData(board_id=board_id)))
        console.print(f"[green]✓ Challenge accepted[/green] [dim](board {board_id})[/dim]")

    async def submit_random_move(self, board_id: str, turn_token: str) -> Move:
        """
        Send a move chosen by the strategy. No legality checks are made.

        :param board_id: Board to move on
        :type board_id: str
        :param turn_token: Token authorizing this move
        :type turn_token: str
        :return: The move that was sent
        :rtype: Move
        """
        coordinates = self.strategy.choose_move(board_id, turn_token)
        move = Move(data=MoveData(
            turn_token=turn_token,
            board_id=board_id,
            from_col=str(coordinates.from_col),
            to_col=str(coordinates.to_col),
            from_row=str(coordinates.from_row),
            to_row=str(coordinates.to_row),
        ))

        console.print(f"[bold green]➜ Move {self.move_count + 1}:[/bold green] {encode_message(move)}")
        await self.connection.send(move)
        self.move_count += 1
        return move

    async def issue_challenge(self, username: Optional[str] = None) -> None:
        """
        Challenge another user. Asks for the name when none is given.

        :param username: User to challenge
        :type username: Optional[str]
        """
        if username is None:
            try:
                username = Prompt.ask("Username to challenge", console=console)
            except EOFError:
                console.print("[yellow]⚠ No input available for the username[/yellow]")
                username = ""
        username = username.strip()
        if not username:
            console.print("[yellow]⚠ No username given, not sending a challenge[/yellow]")
            return

        await self.connection.send(Message(action=Action.CHALLENGE.value,
                                           data=MessageData(username=username)))
        console.print(f"[green]✓ Challenge sent to[/green] [bold]{username}[/bold]")


def load_strategy_from_file(file_path: str, min_offset: int, max_offset: int) -> StrategyBase:
    """
    Dynamically load a Strategy class from a Python file.

    :param file_path: Path to the strategy file
    :type file_path: str
    :param min_offset: Smallest coordinate
    :type min_offset: int
    :param max_offset: Exclusive upper bound for coordinates
    :type max_offset: int
    :return: Strategy instance
    :rtype: StrategyBase
    :raises ImportError: If the strategy file cannot be loaded
    :raises AttributeError: If the Strategy class is not found
    """
    try:
        spec = importlib.util.spec_from_file_location("strategy_module", file_path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load module from {file_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules["strategy_module"] = module
        spec.loader.exec_module(module)

        if not hasattr(module, 'Strategy'):
            raise AttributeError(f"Strategy class not found in {file_path}")

        strategy_class = getattr(module, 'Strategy')
        return strategy_class(min_offset=min_offset, max_offset=max_offset)
    except Exception as e:
        console.print(f"[red]✗ Error loading strategy from {file_path}:[/red] {e}")
        raise


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='MegaChess Client - random mover')
    parser.add_argument('--url', type=str, default=DEFAULT_URL,
                        help=f'Websocket URL of the service (default: {DEFAULT_URL})')
    parser.add_argument('--token-env', type=str, default=AUTH_TOKEN_ENV,
                        help=f'Environment variable holding the auth token (default: {AUTH_TOKEN_ENV})')
    parser.add_argument('--max-reconnect-attempts', type=int, default=DEFAULT_MAX_RECONNECT_ATTEMPTS,
                        help=f'Reconnection attempts after a connection failure '
                             f'(default: {DEFAULT_MAX_RECONNECT_ATTEMPTS})')
    parser.add_argument('--reconnect-delay', type=float, default=0.0,
                        help='Delay between failed reconnection attempts in seconds (default: 0.0)')
    parser.add_argument('--min-offset', type=int, default=MIN_OFFSET,
                        help=f'Smallest coordinate (default: {MIN_OFFSET})')
    parser.add_argument('--max-offset', type=int, default=MAX_OFFSET,
                        help=f'Exclusive upper bound for coordinates (default: {MAX_OFFSET})')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the random strategy (default: unseeded)')
    parser.add_argument('--strategy', type=str, default=None,
                        help='Path to custom strategy file (default: uses built-in strategy.py)')
    parser.add_argument('--challenge', nargs='?', const='', default=None, metavar='USERNAME',
                        help='Challenge a user after connecting; prompts when USERNAME is omitted')
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """
    Parse command-line arguments and run the client.

    :return: Process exit status
    :rtype: int
    """
    args = parse_args(argv)

    if args.strategy:
        strategy = load_strategy_from_file(args.strategy, args.min_offset, args.max_offset)
        console.print(f"[cyan]Using custom strategy:[/cyan] {args.strategy}")
    else:
        from megachess_client.strategy import Strategy
        strategy = Strategy(min_offset=args.min_offset, max_offset=args.max_offset, seed=args.seed)
        console.print("[cyan]Using default strategy[/cyan]")

    connection = ConnectionManager(args.url, token_env=args.token_env,
                                   max_reconnect_attempts=args.max_reconnect_attempts,
                                   reconnect_delay=args.reconnect_delay)
    client = MegaChessClient(connection, strategy)

    try:
        return asyncio.run(client.run(args.challenge))
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Client stopped by user[/yellow]")
        return 130


if __name__ == '__main__':
    sys.exit(main())
