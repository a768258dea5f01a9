# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Connection configuration for EdgeServer bot providers."""
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TIMEOUT_SECONDS = 300.0


class BotProviderConfig(BaseModel):
    """Immutable parameters for talking to one bot provider.

    Shared read-only by every request and stream created from it.

    Attributes:
        host: EdgeServer base URL (e.g. http://localhost:8080).
        namespace: Namespace the bot provider belongs to.
        bot_provider_name: Name of the bot provider.
        api_key: Pre-issued API key sent in the X-API-KEY header.
        timeout: Whole-request timeout in seconds.
        http_client: Custom client to use instead of a per-call one. The
            caller owns it; the library never closes it.
        transport: Transport for the clients the library creates itself.
        max_reconnects: Reconnect budget for a stream; None is unlimited.
        reconnect_base_delay: First reconnect delay in seconds.
        reconnect_max_delay: Upper bound for the reconnect delay.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: str = Field(..., min_length=1)
    namespace: str = Field(..., min_length=1)
    bot_provider_name: str = Field(..., min_length=1)
    api_key: str = ""
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    http_client: httpx.AsyncClient | None = None
    transport: httpx.AsyncBaseTransport | None = None
    max_reconnects: int | None = Field(default=None, ge=0)
    reconnect_base_delay: float = Field(default=0.5, ge=0)
    reconnect_max_delay: float = Field(default=30.0, ge=0)

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        """Require an http(s) URL and drop trailing slashes."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("host must be an http:// or https:// URL")
        return value.rstrip("/")

    @property
    def base_url(self) -> str:
        """URL prefix of every bot-provider endpoint."""
        return (
            f"{self.host}/ns/{quote(self.namespace, safe='')}"
            f"/bot-provider/{quote(self.bot_provider_name, safe='')}"
        )

    def endpoint(self, path: str) -> str:
        """Build the URL of a bot-provider endpoint.

        Args:
            path: Endpoint path below the provider, e.g. "message/sse".

        Returns:
            Absolute endpoint URL.
        """
        return f"{self.base_url}/{path.lstrip('/')}"

    def auth_headers(self) -> dict[str, str]:
        return {"X-API-KEY": self.api_key}

    def create_http_client(self) -> httpx.AsyncClient:
        """Create a client for one call, honouring timeout and transport."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        )


class EdgeServerSettings(BaseSettings):
    """Connection settings read from the environment.

    Variables: EDGE_SERVER_HOST, NAMESPACE, BOT_PROVIDER_NAME,
    BOT_PROVIDER_API_KEY and LOG_LEVEL. A local .env file is honoured.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    edge_server_host: str = Field(
        default="http://localhost:8080",
        description="EdgeServer host URL",
    )
    namespace: str = Field(default="default", description="Namespace")
    bot_provider_name: str = Field(default="default-bot", description="Bot provider name")
    bot_provider_api_key: str = Field(default="", description="Bot provider API key")
    log_level: str = Field(default="info", description="Log level")

    def to_config(self, **overrides: object) -> BotProviderConfig:
        """Build a BotProviderConfig from these settings.

        Args:
            **overrides: BotProviderConfig fields to set explicitly.

        Returns:
            The resulting configuration.
        """
        values: dict[str, object] = {
            "host": self.edge_server_host,
            "namespace": self.namespace,
            "bot_provider_name": self.bot_provider_name,
            "api_key": self.bot_provider_api_key,
        }
        values.update(overrides)
        return BotProviderConfig.model_validate(values)
