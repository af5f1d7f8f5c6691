"""Core type definitions for the Generative Language API client.

All value objects are frozen dataclasses (immutable).  Each type knows how to
render itself in the REST wire format via ``to_json``; response objects are
built from the raw JSON tree with the ``extract_*`` helpers at the bottom of
this module.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Union

from genai_client.api.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Literal type aliases
# ---------------------------------------------------------------------------

Role = Literal["user", "model", "tool", "system"]

FunctionCallingMode = Literal["AUTO", "ANY", "NONE"]

JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]
"""Any value that survives a round-trip through :mod:`json`."""

DEFAULT_MAXIMUM_REMOTE_CALLS = 10


# ---------------------------------------------------------------------------
# Part payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InlineData:
    """Base64-encoded binary data sent inline with a request."""

    mime_type: str
    data: str

    def to_json(self) -> dict[str, Any]:
        return {"mimeType": self.mime_type, "data": self.data}


@dataclass(frozen=True)
class FileData:
    """Reference to a previously uploaded file."""

    mime_type: str
    file_uri: str

    def to_json(self) -> dict[str, Any]:
        return {"mimeType": self.mime_type, "fileUri": self.file_uri}


@dataclass(frozen=True)
class FunctionCall:
    """A function invocation issued by the model."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "args": self.args}
        if self.id:
            result["id"] = self.id
        return result


@dataclass(frozen=True)
class FunctionResponse:
    """The result of a function invocation, returned to the model."""

    name: str
    response: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "response": self.response}
        if self.id:
            result["id"] = self.id
        return result


# ---------------------------------------------------------------------------
# Part / Content
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Part:
    """An atomic piece of a conversation turn.

    Exactly one of the payload fields is set.  Use the ``from_*``
    constructors rather than building instances by hand; they validate
    their inputs.
    """

    text: str | None = None
    inline_data: InlineData | None = None
    file_data: FileData | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None

    @classmethod
    def from_text(cls, text: str) -> Part:
        return cls(text=text)

    @classmethod
    def from_inline_data(cls, mime_type: str, data_base64: str) -> Part:
        if not mime_type:
            raise ConfigurationError("mime_type is required for inline data")
        if not data_base64:
            raise ConfigurationError("data_base64 is required for inline data")
        return cls(inline_data=InlineData(mime_type=mime_type, data=data_base64))

    @classmethod
    def from_bytes(cls, data: bytes | str, mime_type: str) -> Part:
        """Build an inline-data part, base64-encoding *data*."""
        raw = data.encode("utf-8") if isinstance(data, str) else data
        return cls.from_inline_data(mime_type, base64.b64encode(raw).decode("ascii"))

    @classmethod
    def from_uri(cls, file_uri: str, mime_type: str) -> Part:
        if not file_uri:
            raise ConfigurationError("file_uri is required for file data")
        if not mime_type:
            raise ConfigurationError("mime_type is required for file data")
        return cls(file_data=FileData(mime_type=mime_type, file_uri=file_uri))

    @classmethod
    def from_function_call(
        cls,
        name: str,
        args: dict[str, Any] | None = None,
        id: str | None = None,  # noqa: A002
    ) -> Part:
        if not name:
            raise ConfigurationError("name is required for function call")
        return cls(function_call=FunctionCall(name=name, args=dict(args or {}), id=id))

    @classmethod
    def from_function_response(
        cls,
        name: str,
        response: dict[str, Any] | None = None,
        id: str | None = None,  # noqa: A002
    ) -> Part:
        if not name:
            raise ConfigurationError("name is required for function response")
        return cls(
            function_response=FunctionResponse(name=name, response=dict(response or {}), id=id),
        )

    def to_json(self) -> dict[str, Any]:
        if self.text is not None:
            return {"text": self.text}
        if self.inline_data is not None:
            return {"inlineData": self.inline_data.to_json()}
        if self.file_data is not None:
            return {"fileData": self.file_data.to_json()}
        if self.function_call is not None:
            return {"functionCall": self.function_call.to_json()}
        if self.function_response is not None:
            return {"functionResponse": self.function_response.to_json()}
        return {}


@dataclass(frozen=True)
class Content:
    """One role-tagged turn in a conversation."""

    parts: tuple[Part, ...]
    role: Role | str = "user"

    def __post_init__(self) -> None:
        # Accept any sequence of parts but store an immutable tuple.
        if not isinstance(self.parts, tuple):
            object.__setattr__(self, "parts", tuple(self.parts))

    @classmethod
    def from_text(cls, text: str, role: Role | str = "user") -> Content:
        return cls(parts=(Part.from_text(text),), role=role)

    @classmethod
    def from_parts(cls, parts: list[Part] | tuple[Part, ...], role: Role | str = "user") -> Content:
        return cls(parts=tuple(parts), role=role)

    @classmethod
    def from_function_response(
        cls,
        name: str,
        response: dict[str, Any],
        role: Role | str = "tool",
    ) -> Content:
        return cls(parts=(Part.from_function_response(name, response),), role=role)

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.role:
            result["role"] = self.role
        result["parts"] = [part.to_json() for part in self.parts]
        return result


def system_instruction_from_text(text: str) -> Content:
    """Wrap *text* as a system-instruction turn."""
    return Content.from_text(text, role="system")


# ---------------------------------------------------------------------------
# Tools and function-calling configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionDeclaration:
    """Schema of a function the model may call."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("function declaration name is required")

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        result["parameters"] = self.parameters
        return result


@dataclass(frozen=True)
class Tool:
    """A group of function declarations offered to the model."""

    function_declarations: tuple[FunctionDeclaration, ...]

    @classmethod
    def from_functions(cls, declarations: list[FunctionDeclaration]) -> Tool:
        if not declarations:
            raise ConfigurationError("at least one function declaration is required")
        return cls(function_declarations=tuple(declarations))

    def to_json(self) -> dict[str, Any]:
        return {
            "functionDeclarations": [d.to_json() for d in self.function_declarations],
        }


@dataclass(frozen=True)
class FunctionCallingConfig:
    mode: FunctionCallingMode | None = None
    allowed_function_names: tuple[str, ...] = ()

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.mode is not None:
            result["mode"] = self.mode
        if self.allowed_function_names:
            result["allowedFunctionNames"] = list(self.allowed_function_names)
        return result


@dataclass(frozen=True)
class ToolConfig:
    function_calling_config: FunctionCallingConfig | None = None

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.function_calling_config is not None:
            result["functionCallingConfig"] = self.function_calling_config.to_json()
        return result


@dataclass(frozen=True)
class AutomaticFunctionCallingConfig:
    """Controls the automatic function-calling loop.

    A ``maximum_remote_calls`` of zero or less is equivalent to
    ``disable=True``.  History is attached to the final response unless
    ``ignore_call_history`` is set.
    """

    disable: bool = False
    maximum_remote_calls: int = DEFAULT_MAXIMUM_REMOTE_CALLS
    ignore_call_history: bool = False


@dataclass(frozen=True)
class GenerateContentConfig:
    """Options for a single ``generateContent`` request."""

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: tuple[str, ...] = ()
    tools: tuple[Tool, ...] = ()
    tool_config: ToolConfig | None = None
    automatic_function_calling: AutomaticFunctionCallingConfig | None = None

    def generation_config_json(self) -> dict[str, Any]:
        """Return the ``generationConfig`` object (sampling fields only)."""
        result: dict[str, Any] = {}
        if self.temperature is not None:
            result["temperature"] = self.temperature
        if self.top_p is not None:
            result["topP"] = self.top_p
        if self.top_k is not None:
            result["topK"] = self.top_k
        if self.candidate_count is not None:
            result["candidateCount"] = self.candidate_count
        if self.max_output_tokens is not None:
            result["maxOutputTokens"] = self.max_output_tokens
        if self.stop_sequences:
            result["stopSequences"] = list(self.stop_sequences)
        return result


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateContentResponse:
    """A decoded ``generateContent`` response (or one streamed fragment)."""

    raw: dict[str, Any]
    text: str = ""
    function_calls: tuple[FunctionCall, ...] = ()
    automatic_function_calling_history: tuple[Content, ...] | None = None

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> GenerateContentResponse:
        return cls(
            raw=raw,
            text=extract_text(raw),
            function_calls=tuple(extract_function_calls(raw)),
        )

    def with_history(self, history: list[Content]) -> GenerateContentResponse:
        return replace(self, automatic_function_calling_history=tuple(history))


# ---------------------------------------------------------------------------
# Response-field extraction
# ---------------------------------------------------------------------------


def _first_candidate_parts(raw: Any) -> list[Any]:
    if not isinstance(raw, dict):
        return []
    candidates = raw.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return []
    first = candidates[0]
    if not isinstance(first, dict):
        return []
    content = first.get("content")
    if not isinstance(content, dict):
        return []
    parts = content.get("parts")
    return parts if isinstance(parts, list) else []


def extract_text(raw: Any) -> str:
    """Concatenate the text parts of the first candidate."""
    return "".join(
        part["text"]
        for part in _first_candidate_parts(raw)
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


def extract_function_calls(raw: Any) -> list[FunctionCall]:
    """Return the function calls of the first candidate, in order."""
    calls: list[FunctionCall] = []
    for part in _first_candidate_parts(raw):
        if not isinstance(part, dict):
            continue
        fn = part.get("functionCall")
        if not isinstance(fn, dict) or not isinstance(fn.get("name"), str):
            continue
        args = fn.get("args")
        calls.append(FunctionCall(
            name=fn["name"],
            args=args if isinstance(args, dict) else {},
            id=fn.get("id"),
        ))
    return calls
