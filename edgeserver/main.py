# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
from typing import Annotated

import typer

from edgeserver.cli.bot import bot_command
from edgeserver.cli.common import CliState
from edgeserver.cli.function import function_command
from edgeserver.config import EdgeServerSettings
from edgeserver.logging import configure_logging


app = typer.Typer(help="EdgeServer bot provider CLI", no_args_is_help=True)
app.command(name="bot", help="Chat with the bot provider interactively.")(bot_command)
app.command(name="function", help="Call the json or form trigger once.")(function_command)


@app.callback()
def main_callback(
    ctx: typer.Context,
    host: Annotated[
        str | None, typer.Option("--host", help="EdgeServer host URL [env: EDGE_SERVER_HOST]")
    ] = None,
    namespace: Annotated[
        str | None, typer.Option("--namespace", help="Namespace [env: NAMESPACE]")
    ] = None,
    bot: Annotated[
        str | None, typer.Option("--bot", help="Bot provider name [env: BOT_PROVIDER_NAME]")
    ] = None,
    apikey: Annotated[
        str | None,
        typer.Option("--apikey", help="Bot provider API key [env: BOT_PROVIDER_API_KEY]"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level: debug, info, warn, error [env: LOG_LEVEL]"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every event and message received")
    ] = False,
) -> None:
    """
    EdgeServer: talk to a bot provider from the terminal.
    """
    settings = EdgeServerSettings()

    level = "debug" if verbose else (log_level or settings.log_level)
    configure_logging(level)

    ctx.obj = CliState(
        host=host or settings.edge_server_host,
        namespace=namespace or settings.namespace,
        bot_provider_name=bot or settings.bot_provider_name,
        api_key=apikey or settings.bot_provider_api_key,
        verbose=verbose,
    )


if __name__ == "__main__":
    app()
