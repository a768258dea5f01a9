# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Shared state and helpers for the CLI commands."""
from dataclasses import dataclass

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from edgeserver.config import BotProviderConfig


console = Console()


@dataclass
class CliState:
    """Global options resolved from flags and environment.

    Attributes:
        host: EdgeServer host URL.
        namespace: Namespace of the bot provider.
        bot_provider_name: Name of the bot provider.
        api_key: Bot provider API key.
        verbose: Print every event / message received.
    """

    host: str
    namespace: str
    bot_provider_name: str
    api_key: str
    verbose: bool = False

    def to_config(self) -> BotProviderConfig:
        """Build the connection configuration, exiting on invalid input.

        Raises:
            typer.Exit: If the API key is missing or the settings are invalid.
        """
        if not self.api_key:
            print_error(
                "Bot provider API key is required "
                "(use --apikey or BOT_PROVIDER_API_KEY env var)"
            )
            raise typer.Exit(1)
        try:
            return BotProviderConfig(
                host=self.host,
                namespace=self.namespace,
                bot_provider_name=self.bot_provider_name,
                api_key=self.api_key,
            )
        except ValidationError as e:
            print_error(f"Invalid connection settings: {e}")
            raise typer.Exit(1) from None


def print_error(message: object) -> None:
    console.print(f"[red]Error:[/red] {escape(str(message))}")
