from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Union

from genai_client.api.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterator

    from genai_client.api.types import JsonValue

FunctionHandler = Callable[[dict[str, Any]], Union["Awaitable[JsonValue]", "JsonValue"]]
"""A local implementation of a model-callable function.

Receives the call's argument mapping and returns a JSON value, either
directly or as an awaitable.  Raising, or returning a value that cannot be
encoded as JSON, reports the failure to the model.
"""


class FunctionHandlerMap:
    """Registry mapping function names to local handlers.

    Registration order is preserved.  Re-registering a name replaces the
    previous handler silently.
    """

    def __init__(self, handlers: dict[str, FunctionHandler] | None = None) -> None:
        self._handlers: dict[str, FunctionHandler] = {}
        for name, handler in (handlers or {}).items():
            self.set_function_handler(name, handler)

    def set_function_handler(self, name: str, handler: FunctionHandler) -> None:
        """Register *handler* under *name*.

        Raises
        ------
        ConfigurationError
            If *name* is empty.
        """
        if not name:
            raise ConfigurationError("function handler name is required")
        self._handlers[name] = handler

    def register(self, name: str | None = None) -> Callable[[FunctionHandler], FunctionHandler]:
        """Decorator form of :meth:`set_function_handler`.

        The function's ``__name__`` is used when *name* is omitted.
        """
        def decorator(handler: FunctionHandler) -> FunctionHandler:
            self.set_function_handler(name or handler.__name__, handler)
            return handler
        return decorator

    def get(self, name: str) -> FunctionHandler | None:
        """Return the handler registered under *name*, or ``None``."""
        return self._handlers.get(name)

    def remove(self, name: str) -> None:
        self._handlers.pop(name, None)

    def clear(self) -> None:
        self._handlers.clear()

    def names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)
