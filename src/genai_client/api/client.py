"""Async client for the Generative Language REST API.

One :class:`Client` owns one :class:`httpx.AsyncClient`, reused across
calls.  Three entry points share the same request construction:

* :meth:`Client.generate_content` -- a single non-streaming call.
* :meth:`Client.generate_content_stream` -- an SSE stream of fragments.
* :meth:`Client.generate_content_afc` -- the automatic function-calling
  loop built on top of :meth:`generate_content`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Union

import httpx

from genai_client import __version__
from genai_client.afc.loop import run_afc_loop
from genai_client.api.env_api_keys import resolve_api_key
from genai_client.api.errors import APIError, ConfigurationError, TransportError
from genai_client.api.payload import parse_payload
from genai_client.api.streaming import GenerateContentStream
from genai_client.api.types import (
    AutomaticFunctionCallingConfig,
    Content,
    GenerateContentConfig,
    GenerateContentResponse,
    system_instruction_from_text,
)

if TYPE_CHECKING:
    import asyncio
    from types import TracebackType

    from genai_client.afc.function_handlers import FunctionHandlerMap
    from genai_client.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/"
DEFAULT_API_VERSION = "v1beta"
DEFAULT_USER_AGENT = f"genai-client/{__version__}"
DEFAULT_TIMEOUT = 60.0

ContentsInput = Union[str, Content, "list[Content]"]
"""A bare prompt, a single turn, or a full conversation."""

SystemInstruction = Union[str, Content, None]


class Client:
    """Generative Language API client.

    Args:
        api_key: API key.  Falls back to ``GOOGLE_API_KEY`` then
            ``GEMINI_API_KEY``.
        base_url: Service root URL.
        api_version: Version path segment, e.g. ``"v1beta"``.
        user_agent: ``User-Agent`` header value.
        timeout: Per-request timeout in seconds.
        http_client: Pre-built ``httpx.AsyncClient`` to use instead of
            creating one.  The caller keeps ownership and must close it.
        afc_config: Loop options used by :meth:`generate_content_afc` when
            the request config carries none.

    Example:
        >>> async with Client() as client:
        ...     response = await client.generate_content("gemini-2.5-flash", "Hi")
        ...     print(response.text)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        afc_config: AutomaticFunctionCallingConfig | None = None,
    ) -> None:
        self.api_key = resolve_api_key(api_key)
        self.base_url = base_url
        self.api_version = api_version
        self.user_agent = user_agent
        self.timeout = timeout
        self.afc_config = afc_config or AutomaticFunctionCallingConfig()

        self._headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
            "User-Agent": user_agent,
        }
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Client:
        """Build a client from loaded :class:`~genai_client.config.settings.Settings`."""
        return cls(
            api_key=api_key,
            base_url=settings.client.base_url,
            api_version=settings.client.api_version,
            user_agent=settings.client.user_agent or DEFAULT_USER_AGENT,
            timeout=settings.client.timeout,
            http_client=http_client,
            afc_config=settings.afc_config(),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_content(
        self,
        model: str,
        contents: ContentsInput,
        config: GenerateContentConfig | None = None,
        system_instruction: SystemInstruction = None,
    ) -> GenerateContentResponse:
        """Issue one non-streaming ``generateContent`` call.

        Raises
        ------
        ConfigurationError
            If *model* or *contents* is empty.
        APIError
            On a non-2xx status or an error envelope in the body.
        TransportError
            If the request could not be completed.
        DecodeError
            If the body is not a JSON object.
        """
        request = self._build_request(model, contents, config, system_instruction, stream=False)
        logger.debug("POST %s", request.url)
        try:
            response = await self._http.send(request)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise TransportError(f"Request failed: {exc}") from exc

        status = response.status_code
        if status < 200 or status >= 300:
            raise APIError(status, response.text)
        return parse_payload(response.text, status)

    def generate_content_stream(
        self,
        model: str,
        contents: ContentsInput,
        config: GenerateContentConfig | None = None,
        system_instruction: SystemInstruction = None,
    ) -> GenerateContentStream:
        """Start a ``streamGenerateContent`` call.

        Input is validated immediately; the request itself is sent when
        iteration starts.

        Example:
            >>> async with client.generate_content_stream(model, "Tell a story") as stream:
            ...     async for chunk in stream:
            ...         print(chunk.text, end="")
        """
        request = self._build_request(model, contents, config, system_instruction, stream=True)
        logger.debug("POST %s (stream)", request.url)
        return GenerateContentStream(self._http, request)

    async def generate_content_afc(
        self,
        model: str,
        contents: ContentsInput,
        function_handlers: FunctionHandlerMap,
        config: GenerateContentConfig | None = None,
        system_instruction: SystemInstruction = None,
        abort_event: asyncio.Event | None = None,
    ) -> GenerateContentResponse:
        """Generate content, resolving function calls with local handlers.

        The loop is bounded by ``config.automatic_function_calling``, falling
        back to the client's ``afc_config``; see
        :func:`genai_client.afc.loop.run_afc_loop` for the exact semantics.
        """
        config = config or GenerateContentConfig()
        initial = self._normalize_contents(contents)
        self._validate_model(model)

        async def model_call(request_contents: list[Content]) -> GenerateContentResponse:
            return await self.generate_content(model, request_contents, config, system_instruction)

        return await run_afc_loop(
            initial,
            function_handlers,
            model_call,
            config=config.automatic_function_calling or self.afc_config,
            abort_event=abort_event,
        )

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build_url(self, model: str, stream: bool) -> str:
        path = f"{self.api_version}/{normalize_model_path(model)}"
        if stream:
            path += ":streamGenerateContent?alt=sse"
        else:
            path += ":generateContent"
        return join_url(self.base_url, path)

    def _build_request(
        self,
        model: str,
        contents: ContentsInput,
        config: GenerateContentConfig | None,
        system_instruction: SystemInstruction,
        stream: bool,
    ) -> httpx.Request:
        self._validate_model(model)
        body = build_request_body(
            self._normalize_contents(contents),
            config or GenerateContentConfig(),
            system_instruction,
        )
        return self._http.build_request(
            "POST",
            self.build_url(model, stream),
            json=body,
            headers=self._headers,
        )

    @staticmethod
    def _validate_model(model: str) -> None:
        if not model:
            raise ConfigurationError("model is required")

    @staticmethod
    def _normalize_contents(contents: ContentsInput) -> list[Content]:
        if isinstance(contents, str):
            normalized = [Content.from_text(contents)]
        elif isinstance(contents, Content):
            normalized = [contents]
        else:
            normalized = list(contents)
        if not normalized:
            raise ConfigurationError("contents is required")
        return normalized


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------


def join_url(base: str, path: str) -> str:
    """Join *base* and *path* with exactly one slash between them."""
    return base.rstrip("/") + "/" + path.lstrip("/")


def normalize_model_path(model: str) -> str:
    """Prefix bare model ids with ``models/``."""
    if model.startswith(("models/", "tunedModels/")):
        return model
    return f"models/{model}"


def build_request_body(
    contents: list[Content],
    config: GenerateContentConfig,
    system_instruction: SystemInstruction = None,
) -> dict[str, Any]:
    """Build the JSON body shared by the streaming and plain endpoints."""
    body: dict[str, Any] = {"contents": [c.to_json() for c in contents]}

    if isinstance(system_instruction, str):
        if system_instruction:
            body["systemInstruction"] = system_instruction_from_text(system_instruction).to_json()
    elif system_instruction is not None:
        body["systemInstruction"] = system_instruction.to_json()

    generation_config = config.generation_config_json()
    if generation_config:
        body["generationConfig"] = generation_config
    if config.tools:
        body["tools"] = [tool.to_json() for tool in config.tools]
    if config.tool_config is not None:
        body["toolConfig"] = config.tool_config.to_json()
    return body
