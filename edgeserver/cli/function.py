# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""One-shot trigger command for a bot provider."""
import asyncio
import json
import time
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from edgeserver.cli.common import CliState, console, print_error
from edgeserver.client.agents import FunctionAgent, new_function_agent_with_config
from edgeserver.exceptions import EdgeServerError


class PayloadError(ValueError):
    """Raised when the trigger payload cannot be read or parsed."""

    pass


def parse_trigger_payload(payload: str | None, payload_file: Path | None) -> dict[str, Any]:
    """Resolve the trigger payload from an inline string or a file.

    Args:
        payload: Inline JSON object.
        payload_file: Path to a file holding a JSON object.

    Returns:
        The payload, or an empty dict when neither source is given.

    Raises:
        PayloadError: If both sources are given, the file cannot be read,
            or the content is not a JSON object.
    """
    if payload and payload_file is not None:
        raise PayloadError("use either --trigger-payload or --trigger-payload-file, not both")

    if payload_file is not None:
        try:
            raw = payload_file.read_text(encoding="utf-8")
        except OSError as e:
            raise PayloadError(f"failed to read payload file: {e}") from e
    elif payload:
        raw = payload
    else:
        return {}

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadError(f"payload must be valid JSON object: {e}") from e
    if not isinstance(parsed, dict):
        raise PayloadError(
            f"payload must be valid JSON object, got {type(parsed).__name__}"
        )
    return parsed


async def run_function_once(
    agent: FunctionAgent,
    payload: dict[str, Any],
    form: bool,
    form_file: Path | None = None,
    form_mime: str | None = None,
) -> Any:
    """Call the json or form trigger once and return its result."""
    if not form:
        return await agent.trigger_json(payload)

    if form_file is None:
        return await agent.trigger_form(payload)

    try:
        handle = form_file.open("rb")
    except OSError as e:
        raise PayloadError(f"failed to open form file: {e}") from e
    with handle:
        return await agent.trigger_form(payload, handle, form_file.name, form_mime or None)


def function_command(
    ctx: typer.Context,
    json_trigger: Annotated[
        bool, typer.Option("--json-trigger", help="Call the /json trigger")
    ] = False,
    form_trigger: Annotated[
        bool, typer.Option("--form-trigger", help="Call the /form trigger")
    ] = False,
    trigger_payload: Annotated[
        str | None, typer.Option("--trigger-payload", help="Payload as JSON string")
    ] = None,
    trigger_payload_file: Annotated[
        Path | None, typer.Option("--trigger-payload-file", help="Payload JSON file path")
    ] = None,
    form_file: Annotated[
        Path | None, typer.Option("--form-file", help="File path for /form trigger")
    ] = None,
    form_mime: Annotated[
        str | None, typer.Option("--form-mime", help="MIME type for the /form file")
    ] = None,
) -> None:
    """Trigger the bot provider once and print the result."""
    if json_trigger == form_trigger:
        print_error(
            "Function agent requires exactly one trigger mode: --json-trigger or --form-trigger"
        )
        raise typer.Exit(1)

    state: CliState = ctx.obj
    config = state.to_config()

    try:
        payload = parse_trigger_payload(trigger_payload, trigger_payload_file)
    except PayloadError as e:
        print_error(e)
        raise typer.Exit(1) from None

    logger.info(
        "FunctionAgent mode",
        mode="form" if form_trigger else "json",
        namespace=config.namespace,
        bot_provider=config.bot_provider_name,
    )

    agent = new_function_agent_with_config(config)
    start = time.monotonic()
    try:
        result = asyncio.run(
            run_function_once(agent, payload, form_trigger, form_file, form_mime)
        )
    except (PayloadError, EdgeServerError) as e:
        print_error(f"function api failed: {e}")
        raise typer.Exit(1) from None

    logger.info(f"Done in {(time.monotonic() - start) * 1000:.0f}ms")
    if result is None:
        console.print("null", markup=False, highlight=False)
        return
    try:
        console.print_json(json.dumps(result))
    except (TypeError, ValueError):
        console.print(repr(result), markup=False, highlight=False)
