# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Interactive conversational shell for a bot provider."""
import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Literal

import typer
from loguru import logger

from edgeserver.cli.common import CliState, console, print_error
from edgeserver.client.agents import BotAgent, new_bot_agent_with_config
from edgeserver.exceptions import EdgeServerError
from edgeserver.models import Blob, BotMessage, PostBackAction, SseEventType


type Transport = Literal["sse", "rest"]

TRANSPORTS: tuple[str, ...] = ("sse", "rest")

HELP_TEXT = """BotAgent commands:
  /help                      Show help
  /exit                      Exit
  /transport sse|rest        Switch message transport
  /debug on|off              Toggle debug for REST /message
  /blob <path> [mime]        Upload blob and attach to conversation
  /blobs                     Show attached blob IDs
  /clear-blobs               Clear attached blob IDs
  /channel [id]              Show or switch channel
  /reset [text]              Send RESET_CHANNEL message
  <any text>                 Send normal message"""


class CommandError(Exception):
    """Raised when a slash command is malformed or unknown."""

    pass


@dataclass
class BotSession:
    """Mutable state of one interactive conversation.

    Attributes:
        channel_id: Channel messages are sent to.
        transport: "sse" to stream replies, "rest" to wait for them.
        debug: Request debug output on the REST transport.
        blob_ids: Blobs attached to every following message.
        seq: Number of messages sent so far.
        verbose: Log every event / message received.
    """

    channel_id: str
    transport: Transport = "sse"
    debug: bool = False
    blob_ids: list[str] = field(default_factory=list)
    seq: int = 0
    verbose: bool = False

    def next_message_id(self) -> str:
        self.seq += 1
        return f"cli-message-{int(time.time())}-{self.seq}"


def print_help() -> None:
    console.print(HELP_TEXT, markup=False, highlight=False)


async def send_bot_message(
    agent: BotAgent,
    session: BotSession,
    text: str,
    action: PostBackAction = PostBackAction.NONE,
) -> None:
    """Send one message over the session's transport and print the reply.

    Args:
        agent: Conversational agent to send through.
        session: Current session; its sequence number is advanced.
        text: Message text.
        action: Post-back action of the message.
    """
    message = BotMessage(
        custom_channel_id=session.channel_id,
        custom_message_id=session.next_message_id(),
        text=text,
        action=action,
        blob_ids=list(session.blob_ids),
    )

    logger.debug(
        "Sending message",
        channel=session.channel_id,
        message=message.custom_message_id,
        transport=session.transport,
        action=str(action),
        blobs=len(session.blob_ids),
    )

    if session.transport == "rest":
        await _send_by_rest(agent, message, session)
    else:
        await _send_by_sse(agent, message, session)


async def _send_by_rest(agent: BotAgent, message: BotMessage, session: BotSession) -> None:
    start = time.monotonic()
    reply = await agent.send_message(message, is_debug=session.debug)

    logger.debug(
        f"REST reply in {(time.monotonic() - start) * 1000:.0f}ms",
        request_id=reply.request_id,
        messages=len(reply.messages),
    )

    for buffered in reply.messages:
        if buffered.text:
            console.print(buffered.text, markup=False, highlight=False)
        if buffered.template is not None:
            logger.debug("Message template", template=str(buffered.template.type))
        if session.verbose:
            logger.debug("Message received", message=buffered.model_dump())

    if reply.error_detail is not None:
        logger.warning(f"Error detail: {reply.error_detail}")


async def _send_by_sse(agent: BotAgent, message: BotMessage, session: BotSession) -> None:
    """Stream the reply, printing message deltas as they arrive.

    Raises:
        StreamError: If the stream ends with an error.
    """
    async with await agent.new_streamer(message) as stream:
        while await stream.advance():
            event = stream.current()
            if event is None:
                continue
            if session.verbose:
                logger.debug("Event received", event=event.model_dump(by_alias=True))

            if event.event_type is SseEventType.MESSAGE_DELTA:
                if event.message is not None and event.message.text:
                    console.print(event.message.text, end="", markup=False, highlight=False)
            elif event.event_type is SseEventType.MESSAGE_COMPLETE:
                console.print()
                if event.message is not None and event.message.template is not None:
                    logger.debug("Message template", template=str(event.message.template.type))

        error = stream.last_error()
        if error is not None:
            raise error


async def upload_blob_file(
    agent: BotAgent,
    channel_id: str,
    path: Path,
    mime: str | None = None,
) -> Blob:
    """Upload a local file as a blob.

    Raises:
        CommandError: If the file cannot be opened.
    """
    try:
        handle = path.open("rb")
    except OSError as e:
        raise CommandError(f"failed to open file: {e}") from e
    with handle:
        return await agent.upload_blob(channel_id, handle, path.name, mime)


async def handle_command(agent: BotAgent, session: BotSession, line: str) -> bool:
    """Execute one slash command.

    Args:
        agent: Conversational agent.
        session: Session to update.
        line: The full input line, starting with "/".

    Returns:
        False when the shell should exit, True otherwise.

    Raises:
        CommandError: On bad usage or an unknown command.
        EdgeServerError: If a remote call made by the command fails.
    """
    parts = line.split()
    command = parts[0]

    match command:
        case "/help":
            print_help()
        case "/exit" | "/quit":
            logger.info("Bye")
            return False
        case "/transport":
            if len(parts) != 2 or parts[1] not in TRANSPORTS:
                raise CommandError("usage: /transport sse|rest")
            session.transport = "sse" if parts[1] == "sse" else "rest"
            logger.info(f"Transport -> {session.transport}")
        case "/debug":
            if len(parts) != 2 or parts[1] not in ("on", "off"):
                raise CommandError("usage: /debug on|off")
            session.debug = parts[1] == "on"
            logger.info(f"Debug -> {session.debug}")
        case "/blob":
            if len(parts) < 2:
                raise CommandError("usage: /blob <path> [mime]")
            mime = parts[2] if len(parts) >= 3 else None
            blob = await upload_blob_file(agent, session.channel_id, Path(parts[1]), mime)
            session.blob_ids.append(blob.blob_id)
            logger.info(f"Blob attached: {blob.blob_id}")
        case "/blobs":
            if not session.blob_ids:
                logger.info("No attached blobs")
            else:
                logger.info(f"Attached blobs: {', '.join(session.blob_ids)}")
        case "/clear-blobs":
            session.blob_ids = []
            logger.info("Attached blobs cleared")
        case "/channel":
            if len(parts) == 1:
                logger.info(f"Current channel: {session.channel_id}")
            else:
                session.channel_id = parts[1]
                logger.info(f"Channel -> {session.channel_id}")
        case "/reset":
            text = line.removeprefix("/reset").strip() or "reset"
            await send_bot_message(agent, session, text, PostBackAction.RESET_CHANNEL)
        case _:
            raise CommandError(f"unknown command: {command} (use /help)")
    return True


async def run_repl(
    agent: BotAgent,
    session: BotSession,
    read_line: Callable[[str], str] = console.input,
) -> None:
    """Read lines until /exit or end of input, sending each to the bot.

    Errors from individual commands or messages are logged and the shell
    keeps going.

    Args:
        agent: Conversational agent.
        session: Session state.
        read_line: Prompt function; raises EOFError at end of input.
    """
    while True:
        try:
            line = (await asyncio.to_thread(read_line, "bot> ")).strip()
        except EOFError:
            logger.info("Input closed, exiting")
            return

        if not line:
            continue

        if line.startswith("/"):
            try:
                keep_going = await handle_command(agent, session, line)
            except (CommandError, EdgeServerError) as e:
                logger.error(f"Command failed: {e}")
                continue
            if not keep_going:
                return
            continue

        try:
            await send_bot_message(agent, session, line)
        except EdgeServerError as e:
            logger.error(f"Send failed: {e}")


def bot_command(
    ctx: typer.Context,
    channel: Annotated[
        str | None,
        typer.Option("--channel", help="Conversation channel ID (auto-generated if empty)"),
    ] = None,
    transport: Annotated[
        str,
        typer.Option("--transport", help="Initial bot transport: sse or rest"),
    ] = "sse",
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Initial debug mode for REST /message"),
    ] = False,
) -> None:
    """Chat with the bot provider interactively.

    Args:
        ctx: Typer context carrying the global CliState.
        channel: Channel to start in.
        transport: Initial transport, "sse" or "rest".
        debug: Initial debug flag for the REST transport.
    """
    state: CliState = ctx.obj
    config = state.to_config()

    initial_transport = transport.strip().lower()
    if initial_transport not in TRANSPORTS:
        print_error(f"Invalid --transport '{transport}' (supported: sse, rest)")
        raise typer.Exit(1)

    session = BotSession(
        channel_id=(channel or "").strip() or f"cli-channel-{int(time.time())}",
        transport="sse" if initial_transport == "sse" else "rest",
        debug=debug,
        verbose=state.verbose,
    )

    logger.info("BotAgent interactive mode")
    logger.info(
        f"Host={config.host} Namespace={config.namespace} "
        f"BotProvider={config.bot_provider_name}"
    )
    logger.info(
        f"Channel={session.channel_id} Transport={session.transport} Debug={session.debug}"
    )
    print_help()

    agent = new_bot_agent_with_config(config)
    try:
        asyncio.run(run_repl(agent, session))
    except KeyboardInterrupt:
        logger.warning("Received interrupt signal, shutting down...")
        raise typer.Exit(130) from None
