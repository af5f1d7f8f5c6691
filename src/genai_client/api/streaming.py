"""Pull-based streaming session over an SSE ``streamGenerateContent`` response.

A :class:`GenerateContentStream` binds one :class:`SseLineParser` to one
HTTP response body.  Nothing is sent until the consumer starts iterating;
each decoded :class:`GenerateContentResponse` is handed out before the next
chunk is read.  Stopping early (``aclose`` or leaving ``async with``)
releases the connection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from genai_client.api.errors import APIError, DecodeError, TransportError
from genai_client.api.payload import parse_payload
from genai_client.api.utils.sse import DONE_SENTINEL, SseLineParser

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterator
    from types import TracebackType

    from genai_client.api.types import GenerateContentResponse

logger = logging.getLogger(__name__)


class GenerateContentStream:
    """Async iterator of streamed response fragments.

    Single use: iterating a second time yields nothing.  Any transport,
    status or decode failure is raised from the iteration and ends it.
    """

    def __init__(self, http: httpx.AsyncClient, request: httpx.Request) -> None:
        self._http = http
        self._request = request
        self._iterator: AsyncGenerator[GenerateContentResponse, None] | None = None

    def __aiter__(self) -> AsyncIterator[GenerateContentResponse]:
        if self._iterator is None:
            self._iterator = self._iterate()
        return self._iterator

    async def aclose(self) -> None:
        """Stop the stream and release the underlying connection."""
        if self._iterator is not None:
            await self._iterator.aclose()

    async def __aenter__(self) -> GenerateContentStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _iterate(self) -> AsyncGenerator[GenerateContentResponse, None]:
        try:
            response = await self._http.send(self._request, stream=True)
        except httpx.TransportError as exc:
            raise TransportError(f"Streaming request failed: {exc}") from exc

        try:
            status = response.status_code
            if status < 200 or status >= 300:
                body = await response.aread()
                raise APIError(status, body.decode("utf-8", errors="replace"))

            parser = SseLineParser()
            done = False
            count = 0

            async for chunk in response.aiter_bytes():
                for payload in parser.feed(chunk):
                    if not payload:
                        continue
                    if payload == DONE_SENTINEL:
                        done = True
                        break
                    count += 1
                    yield parse_payload(payload, status)
                if done:
                    break

            for payload in parser.flush():
                if not payload or payload == DONE_SENTINEL:
                    continue
                count += 1
                yield parse_payload(payload, status)

            logger.debug(
                "Stream finished after %d payload(s) (sentinel seen: %s)", count, done,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"Stream interrupted: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Invalid UTF-8 in stream: {exc}", status_code=response.status_code,
            ) from exc
        finally:
            await response.aclose()
