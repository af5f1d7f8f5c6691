"""Tests for the genai command-line interface."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest
from click.testing import CliRunner

from genai_client import __version__
from genai_client.cli import main as cli_main
from genai_client.cli.args import cli
from tests.conftest import make_client, make_response_json, sse_body

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with an empty project directory and home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _use_transport(monkeypatch: pytest.MonkeyPatch, handler) -> None:
    monkeypatch.setattr(cli_main, "_create_client", lambda settings: make_client(handler))


class TestVersion:
    def test_version_flag(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestGenerate:
    def test_prints_response_text(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=make_response_json("Hello from the model"))

        _use_transport(monkeypatch, handler)
        result = CliRunner().invoke(
            cli, ["generate", "hi", "-m", "gemini-2.5-pro", "-s", "Be brief.", "--temperature", "0.5"],
        )

        assert result.exit_code == 0, result.output
        assert "Hello from the model" in result.output
        body = json.loads(seen[0].content)
        assert seen[0].url.path.endswith("models/gemini-2.5-pro:generateContent")
        assert body["systemInstruction"]["parts"] == [{"text": "Be brief."}]
        assert body["generationConfig"] == {"temperature": 0.5}

    def test_default_model_from_settings(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        settings_path = isolated / ".genai" / "settings.yaml"
        settings_path.parent.mkdir()
        settings_path.write_text("models:\n  default: project-model\n")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=make_response_json("ok"))

        _use_transport(monkeypatch, handler)
        result = CliRunner().invoke(cli, ["generate", "hi"])

        assert result.exit_code == 0, result.output
        assert seen[0].url.path.endswith("models/project-model:generateContent")

    def test_stream(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        body = sse_body(make_response_json("Hel"), make_response_json("lo"), "[DONE]")
        _use_transport(monkeypatch, lambda request: httpx.Response(200, content=body))

        result = CliRunner().invoke(cli, ["generate", "hi", "--stream"])

        assert result.exit_code == 0, result.output
        assert "Hello" in result.output

    def test_api_error_exit_code(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _use_transport(monkeypatch, lambda request: httpx.Response(403, text="forbidden"))

        result = CliRunner().invoke(cli, ["generate", "hi"])

        assert result.exit_code == 1
        assert "403" in result.output

    def test_missing_api_key(self, isolated: Path) -> None:
        result = CliRunner().invoke(cli, ["generate", "hi"])

        assert result.exit_code == 1
        assert "API key is required" in result.output

    def test_invalid_settings(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GENAI_TIMEOUT", "later")

        result = CliRunner().invoke(cli, ["generate", "hi"])

        assert result.exit_code == 1
        assert "GENAI_TIMEOUT" in result.output


class TestConfig:
    def test_shows_effective_settings(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GENAI_AFC_MAX_CALLS", "3")

        result = CliRunner().invoke(cli, ["config"])

        assert result.exit_code == 0, result.output
        assert "models.default" in result.output
        assert "gemini-2.5-flash" in result.output
        assert "afc.maximum_remote_calls" in result.output

    def test_invalid_settings(self, isolated: Path) -> None:
        settings_path = isolated / ".genai" / "settings.yaml"
        settings_path.parent.mkdir()
        settings_path.write_text("client: [unclosed\n")

        result = CliRunner().invoke(cli, ["config"])

        assert result.exit_code == 1
        assert "Invalid YAML" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
