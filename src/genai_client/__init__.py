"""genai-client: async client for the Generative Language API.

Quick start::

    from genai_client import Client

    async with Client() as client:
        response = await client.generate_content("gemini-2.5-flash", "Hello!")
        print(response.text)
"""

from __future__ import annotations

__version__ = "0.1.0"

from genai_client.afc.function_handlers import FunctionHandler, FunctionHandlerMap
from genai_client.api.client import Client
from genai_client.api.errors import (
    AfcAbortedError,
    APIError,
    ConfigurationError,
    DecodeError,
    FunctionLookupError,
    GenAIError,
    TransportError,
)
from genai_client.api.streaming import GenerateContentStream
from genai_client.api.types import (
    AutomaticFunctionCallingConfig,
    Content,
    FileData,
    FunctionCall,
    FunctionCallingConfig,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentConfig,
    GenerateContentResponse,
    InlineData,
    Part,
    Tool,
    ToolConfig,
    system_instruction_from_text,
)

__all__ = [
    "APIError",
    "AfcAbortedError",
    "AutomaticFunctionCallingConfig",
    "Client",
    "ConfigurationError",
    "Content",
    "DecodeError",
    "FileData",
    "FunctionCall",
    "FunctionCallingConfig",
    "FunctionDeclaration",
    "FunctionHandler",
    "FunctionHandlerMap",
    "FunctionLookupError",
    "FunctionResponse",
    "GenAIError",
    "GenerateContentConfig",
    "GenerateContentResponse",
    "GenerateContentStream",
    "InlineData",
    "Part",
    "Tool",
    "ToolConfig",
    "TransportError",
    "__version__",
    "system_instruction_from_text",
]
