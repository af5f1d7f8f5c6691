"""Decoding of response payloads shared by the streaming and plain paths."""

from __future__ import annotations

import json
from typing import Any

from genai_client.api.errors import APIError, DecodeError
from genai_client.api.types import GenerateContentResponse


def _error_code(raw: dict[str, Any], fallback: int) -> int:
    err = raw.get("error")
    if isinstance(err, dict):
        code = err.get("code")
        if isinstance(code, int) and not isinstance(code, bool):
            return code
    return fallback


def parse_payload(payload: str, fallback_status: int) -> GenerateContentResponse:
    """Decode one JSON payload into a :class:`GenerateContentResponse`.

    Raises
    ------
    APIError
        If the payload is an error envelope (``{"error": {...}}``).  The
        envelope's ``code`` wins over *fallback_status*.
    DecodeError
        If the payload is not a JSON object.
    """
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise DecodeError(
            f"Invalid JSON payload: {exc}",
            status_code=fallback_status,
            response_body=payload,
        ) from exc

    if not isinstance(raw, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(raw).__name__}",
            status_code=fallback_status,
            response_body=payload,
        )
    if "error" in raw:
        raise APIError(_error_code(raw, fallback_status), payload)
    return GenerateContentResponse.from_json(raw)
