# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Tests for the one-shot function command."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from edgeserver.cli.function import PayloadError, parse_trigger_payload, run_function_once
from edgeserver.exceptions import ApiResponseError


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOT_PROVIDER_API_KEY", "k")


@pytest.fixture
def agent() -> MagicMock:
    mock = MagicMock()
    mock.trigger_json = AsyncMock(return_value={"ok": True})
    mock.trigger_form = AsyncMock(return_value=None)
    return mock


class TestParseTriggerPayload:
    """Tests for parse_trigger_payload."""

    def test_defaults_to_empty_object(self):
        assert parse_trigger_payload(None, None) == {}

    def test_inline_payload(self):
        assert parse_trigger_payload('{"orderId": 42}', None) == {"orderId": 42}

    def test_payload_file(self, tmp_path):
        path = tmp_path / "payload.json"
        path.write_text('{"a": [1, 2]}')

        assert parse_trigger_payload(None, path) == {"a": [1, 2]}

    def test_both_sources_rejected(self, tmp_path):
        with pytest.raises(PayloadError, match="not both"):
            parse_trigger_payload("{}", tmp_path / "payload.json")

    @pytest.mark.parametrize("raw", ["[1, 2]", "not json", "42"])
    def test_must_be_json_object(self, raw):
        with pytest.raises(PayloadError, match="payload must be valid JSON object"):
            parse_trigger_payload(raw, None)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PayloadError, match="failed to read payload file"):
            parse_trigger_payload(None, tmp_path / "missing.json")


class TestRunFunctionOnce:
    async def test_json_mode(self, agent):
        assert await run_function_once(agent, {"a": 1}, form=False) == {"ok": True}
        agent.trigger_json.assert_awaited_once_with({"a": 1})

    async def test_form_mode_without_file(self, agent):
        await run_function_once(agent, {"a": 1}, form=True)

        agent.trigger_form.assert_awaited_once_with({"a": 1})

    async def test_form_mode_with_file(self, agent, tmp_path):
        path = tmp_path / "report.csv"
        path.write_text("a,b\n")

        await run_function_once(agent, {}, form=True, form_file=path, form_mime="text/csv")

        args = agent.trigger_form.await_args.args
        assert args[0] == {}
        assert args[2] == "report.csv"
        assert args[3] == "text/csv"

    async def test_form_file_missing(self, agent, tmp_path):
        with pytest.raises(PayloadError, match="failed to open form file"):
            await run_function_once(agent, {}, form=True, form_file=tmp_path / "nope.csv")


class TestFunctionCommand:
    """Tests for `edgeserver function`."""

    def test_requires_exactly_one_mode(self, cli_runner):
        from edgeserver.main import app

        for args in (["function"], ["function", "--json-trigger", "--form-trigger"]):
            result = cli_runner.invoke(app, args)

            assert result.exit_code == 1
            assert "exactly one trigger mode" in result.output

    @patch("edgeserver.cli.function.new_function_agent_with_config")
    def test_json_trigger_prints_result(self, mock_factory, agent, cli_runner):
        from edgeserver.main import app

        mock_factory.return_value = agent

        result = cli_runner.invoke(
            app, ["function", "--json-trigger", "--trigger-payload", '{"orderId": 42}']
        )

        assert result.exit_code == 0, result.output
        agent.trigger_json.assert_awaited_once_with({"orderId": 42})
        assert '"ok": true' in result.output

    @patch("edgeserver.cli.function.new_function_agent_with_config")
    def test_null_result(self, mock_factory, agent, cli_runner):
        from edgeserver.main import app

        mock_factory.return_value = agent

        result = cli_runner.invoke(app, ["function", "--form-trigger"])

        assert result.exit_code == 0, result.output
        assert "null" in result.output

    @patch("edgeserver.cli.function.new_function_agent_with_config")
    def test_invalid_payload(self, mock_factory, agent, cli_runner):
        from edgeserver.main import app

        mock_factory.return_value = agent

        result = cli_runner.invoke(
            app, ["function", "--json-trigger", "--trigger-payload", "[1]"]
        )

        assert result.exit_code == 1
        assert "payload must be valid JSON object" in result.output
        agent.trigger_json.assert_not_awaited()

    @patch("edgeserver.cli.function.new_function_agent_with_config")
    def test_remote_failure(self, mock_factory, agent, cli_runner):
        from edgeserver.main import app

        agent.trigger_json.side_effect = ApiResponseError("trigger json", 200, "bad payload", "E400")
        mock_factory.return_value = agent

        result = cli_runner.invoke(app, ["function", "--json-trigger"])

        assert result.exit_code == 1
        assert "bad payload" in result.output

    @patch("edgeserver.cli.function.new_function_agent_with_config")
    def test_uses_global_options(self, mock_factory, agent, cli_runner):
        from edgeserver.main import app

        mock_factory.return_value = agent

        result = cli_runner.invoke(
            app,
            [
                "--host", "https://edge.example.com",
                "--namespace", "prod",
                "--bot", "orders",
                "--apikey", "flag-key",
                "--log-level", "error",
                "function", "--json-trigger",
            ],
        )

        assert result.exit_code == 0, result.output
        config = mock_factory.call_args.args[0]
        assert config.base_url == "https://edge.example.com/ns/prod/bot-provider/orders"
        assert config.api_key == "flag-key"
        assert json.loads(result.output) == {"ok": True}
