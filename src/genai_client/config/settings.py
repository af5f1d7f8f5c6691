"""Settings Pydantic models for genai-client configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from genai_client.api.types import DEFAULT_MAXIMUM_REMOTE_CALLS, AutomaticFunctionCallingConfig


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    base_url: str = "https://generativelanguage.googleapis.com/"
    api_version: str = "v1beta"
    user_agent: str | None = None
    timeout: float = 60.0

    model_config = {"extra": "ignore"}


class ModelsConfig(BaseModel):
    """Model selection."""

    default: str = "gemini-2.5-flash"

    model_config = {"extra": "ignore"}


class AfcConfig(BaseModel):
    """Automatic function-calling defaults."""

    disable: bool = False
    maximum_remote_calls: int = DEFAULT_MAXIMUM_REMOTE_CALLS
    ignore_call_history: bool = False

    model_config = {"extra": "ignore"}


class Settings(BaseModel):
    """Effective configuration after files and environment are merged."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    afc: AfcConfig = Field(default_factory=AfcConfig)

    verbose: bool = False

    model_config = {"extra": "ignore"}

    def afc_config(self) -> AutomaticFunctionCallingConfig:
        return AutomaticFunctionCallingConfig(
            disable=self.afc.disable,
            maximum_remote_calls=self.afc.maximum_remote_calls,
            ignore_call_history=self.afc.ignore_call_history,
        )
