"""Tests for genai_client.config.settings — Settings Pydantic models."""

from __future__ import annotations

from genai_client.config.settings import AfcConfig, ClientConfig, ModelsConfig, Settings


class TestClientConfig:
    def test_defaults(self) -> None:
        cfg = ClientConfig()
        assert cfg.base_url == "https://generativelanguage.googleapis.com/"
        assert cfg.api_version == "v1beta"
        assert cfg.user_agent is None
        assert cfg.timeout == 60.0


class TestModelsConfig:
    def test_defaults(self) -> None:
        assert ModelsConfig().default == "gemini-2.5-flash"


class TestAfcConfig:
    def test_defaults(self) -> None:
        cfg = AfcConfig()
        assert cfg.disable is False
        assert cfg.maximum_remote_calls == 10
        assert cfg.ignore_call_history is False


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.verbose is False
        assert isinstance(s.client, ClientConfig)

    def test_extra_fields_ignored(self) -> None:
        s = Settings.model_validate({"unknown": 1, "client": {"proxy": "x"}})
        assert s.client.timeout == 60.0

    def test_nested_dict(self) -> None:
        s = Settings.model_validate({"afc": {"maximum_remote_calls": 2}})
        assert s.afc.maximum_remote_calls == 2
        assert s.afc.disable is False

    def test_afc_config_conversion(self) -> None:
        s = Settings.model_validate({"afc": {"maximum_remote_calls": 0, "ignore_call_history": True}})
        cfg = s.afc_config()
        assert cfg.maximum_remote_calls == 0
        assert cfg.ignore_call_history is True
        assert cfg.disable is False
