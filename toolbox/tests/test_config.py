"""
Tests for settings and the authorization gate.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from toolbox.cli.main import cli
from toolbox.core.auth import is_authorized
from toolbox.core.config import Settings, get_settings

SAMPLE_TOOLS = Path(__file__).parent.parent / "samples" / "tools.yaml"


@pytest.fixture
def fresh_settings():
    """Clear the settings cache around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, monkeypatch, fresh_settings):
        monkeypatch.delenv("TOOLBOX_INVOCATION_TIMEOUT_SECONDS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.LOG_FORMAT == "text"
        assert settings.INVOCATION_TIMEOUT_SECONDS == 30.0
        assert settings.AUTH_TOKEN_HEADER == "Authorization"

    def test_env_override(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("TOOLBOX_INVOCATION_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("TOOLBOX_ENVIRONMENT", "Production")
        settings = get_settings()
        assert settings.INVOCATION_TIMEOUT_SECONDS == 2.5
        assert settings.is_production()

    def test_cached(self, fresh_settings):
        assert get_settings() is get_settings()

    def test_header_name_from_settings(self, monkeypatch, fresh_settings, stats_tool, source_provider):
        monkeypatch.setenv("TOOLBOX_AUTH_TOKEN_HEADER", "X-Toolbox-Token")
        assert stats_tool.get_auth_token_header_name(source_provider) == "X-Toolbox-Token"

    def test_tools_file_from_settings(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("TOOLBOX_TOOLS_FILE", str(SAMPLE_TOOLS))
        result = CliRunner().invoke(cli, ["manifest", "--mcp"])

        assert result.exit_code == 0
        assert len(json.loads(result.output)["tools"]) == 2

    def test_no_tools_file(self, monkeypatch, fresh_settings):
        monkeypatch.delenv("TOOLBOX_TOOLS_FILE", raising=False)
        monkeypatch.chdir(SAMPLE_TOOLS.parent)
        result = CliRunner().invoke(cli, ["manifest"])

        assert result.exit_code == 2
        assert "TOOLBOX_TOOLS_FILE" in result.output


class TestAuth:

    @pytest.mark.parametrize(
        "required,verified,expected",
        [
            ((), [], True),
            ((), ["oauth"], True),
            (("oauth",), [], False),
            (("oauth",), ["oauth"], True),
            (("oauth",), ["other"], False),
            (("a", "b"), ["b"], True),
            (("oauth",), None, False),
        ],
    )
    def test_is_authorized(self, required, verified, expected):
        assert is_authorized(required, verified) is expected
