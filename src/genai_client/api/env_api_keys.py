"""API key discovery: explicit argument first, then the environment."""

from __future__ import annotations

import os

from genai_client.api.errors import ConfigurationError

# Provider name -> ordered list of environment variable names to probe.
# The first non-empty value wins.
_ENV_KEY_MAP: dict[str, list[str]] = {
    "google": ["GOOGLE_API_KEY", "GEMINI_API_KEY"],
}


def get_env_api_key(provider: str = "google") -> str | None:
    """Return the first non-empty API key set in the environment for *provider*."""
    for var in _ENV_KEY_MAP.get(provider, []):
        val = os.environ.get(var, "").strip()
        if val:
            return val
    return None


def resolve_api_key(api_key: str | None = None, provider: str = "google") -> str:
    """Return a usable API key or raise :class:`ConfigurationError`."""
    key = (api_key or "").strip() or get_env_api_key(provider)
    if not key:
        names = "/".join(_ENV_KEY_MAP.get(provider, []))
        raise ConfigurationError(f"API key is required. Pass api_key or set {names}.")
    return key
