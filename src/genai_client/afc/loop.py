"""Automatic function-calling (AFC) loop.

Repeatedly calls the model; whenever the response asks for function calls,
runs the matching local handlers and feeds their results back as a new
model/tool turn pair.  The loop ends when the model stops asking for calls
or the remote-call budget is spent.

Handler failures are reported to the model as ``{"error": ...}`` and do not
stop the loop.  A call naming an unregistered function is fatal.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, Callable

from genai_client.api.errors import AfcAbortedError, FunctionLookupError
from genai_client.api.types import (
    AutomaticFunctionCallingConfig,
    Content,
    FunctionCall,
    Part,
)

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable

    from genai_client.afc.function_handlers import FunctionHandlerMap
    from genai_client.api.types import GenerateContentResponse

logger = logging.getLogger(__name__)

# Signature of the single-shot model call the loop drives.
ModelCallFn = Callable[[list[Content]], "Awaitable[GenerateContentResponse]"]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def is_afc_disabled(
    function_handlers: FunctionHandlerMap | None,
    config: AutomaticFunctionCallingConfig | None,
) -> bool:
    """Return ``True`` when the loop must fall back to one plain call."""
    if function_handlers is None or len(function_handlers) == 0:
        return True
    if config is None:
        return False
    return config.disable or config.maximum_remote_calls <= 0


async def run_afc_loop(
    contents: list[Content],
    function_handlers: FunctionHandlerMap,
    model_call: ModelCallFn,
    config: AutomaticFunctionCallingConfig | None = None,
    abort_event: asyncio.Event | None = None,
) -> GenerateContentResponse:
    """Run the function-calling loop and return the final response.

    Parameters
    ----------
    contents:
        The caller's conversation so far.  Never mutated.
    function_handlers:
        Dispatch table for model-issued function calls.
    model_call:
        Issues one non-streaming request for the given contents.
    config:
        Budget and history options.  Defaults to
        :class:`AutomaticFunctionCallingConfig`.
    abort_event:
        Checked before every model call and every handler invocation.

    Returns
    -------
    GenerateContentResponse
        The first response without function calls, or the response that
        arrived once the budget was spent, returned as-is.  Carries the
        call history unless ``ignore_call_history`` is set.

    Raises
    ------
    FunctionLookupError
        If the model calls a function with no registered handler.
    AfcAbortedError
        If *abort_event* is set while the loop is running.
    """
    if is_afc_disabled(function_handlers, config):
        logger.debug("Automatic function calling disabled; issuing a single call")
        return await model_call(list(contents))

    afc_config = config or AutomaticFunctionCallingConfig()
    request_contents: list[Content] = list(contents)
    history: list[Content] | None = None if afc_config.ignore_call_history else list(contents)
    remaining_calls = afc_config.maximum_remote_calls

    while True:
        _check_abort(abort_event)
        response = await model_call(list(request_contents))

        if not response.function_calls:
            break
        if remaining_calls <= 0:
            logger.debug(
                "Reached the maximum of %d remote call(s); returning last response",
                afc_config.maximum_remote_calls,
            )
            break

        tool_parts = await _execute_function_calls(
            response.function_calls, function_handlers, abort_event,
        )
        if not tool_parts:
            break

        remaining_calls -= 1
        call_turn = Content(
            parts=tuple(Part(function_call=call) for call in response.function_calls),
            role="model",
        )
        tool_turn = Content(parts=tuple(tool_parts), role="tool")
        request_contents.extend((call_turn, tool_turn))
        if history is not None:
            history.extend((call_turn, tool_turn))

        logger.debug(
            "AFC round-trip resolved %d call(s); %d remote call(s) left",
            len(tool_parts), remaining_calls,
        )

    if history is not None:
        response = response.with_history(history)
    return response


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_abort(abort_event: asyncio.Event | None) -> None:
    if abort_event is not None and abort_event.is_set():
        raise AfcAbortedError("Automatic function calling aborted")


async def _execute_function_calls(
    calls: tuple[FunctionCall, ...],
    function_handlers: FunctionHandlerMap,
    abort_event: asyncio.Event | None,
) -> list[Part]:
    """Run each call in order and return one function-response part per call."""
    parts: list[Part] = []
    for call in calls:
        handler = function_handlers.get(call.name)
        if handler is None:
            raise FunctionLookupError(call.name)

        _check_abort(abort_event)
        payload: dict[str, Any]
        try:
            result = handler(dict(call.args))
            if inspect.isawaitable(result):
                result = await result
            # The result is sent back verbatim and must survive JSON encoding.
            json.dumps(result)
            payload = {"result": result}
        except Exception as exc:
            logger.warning("Function handler %r failed: %s", call.name, exc)
            payload = {"error": str(exc)}

        parts.append(Part.from_function_response(call.name, payload, id=call.id))
    return parts
