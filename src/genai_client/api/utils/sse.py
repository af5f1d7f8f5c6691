"""Incremental Server-Sent-Events line parser.

Turns an arbitrarily chunked byte stream into complete event payloads.
Chunk boundaries need not line up with line or event boundaries.

Two framings are understood:

* ``data: <payload>`` lines.  Each ``data:`` line is one payload; blank
  lines are event separators and carry nothing.
* Bare JSON bodies without any ``data:`` prefix, as sent for some error
  responses.  Such lines are accumulated until the count of ``{`` minus
  ``}`` returns to zero.  The count is purely textual, so braces inside
  JSON string literals will desynchronise it.

Lines are decoded as strict UTF-8; invalid bytes raise
:class:`UnicodeDecodeError` from :meth:`SseLineParser.feed` or
:meth:`SseLineParser.flush`.

A parser instance belongs to exactly one stream and is not safe to share.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DONE_SENTINEL = "[DONE]"

_DATA_PREFIX = "data:"


@dataclass
class SseLineParser:
    """Stateful parser fed with :meth:`feed` and drained with :meth:`flush`."""

    line_buffer: bytearray = field(default_factory=bytearray)
    error_buffer: str = ""
    error_brace_balance: int = 0

    def feed(self, chunk: bytes | str) -> list[str]:
        """Consume *chunk* and return every payload it completes (maybe none).

        Any trailing partial line is kept for the next call.
        """
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self.line_buffer.extend(chunk)

        payloads: list[str] = []
        start = 0
        while True:
            line_end = self.line_buffer.find(b"\n", start)
            if line_end < 0:
                break
            # Lines are decoded whole so multi-byte characters split across
            # chunks are never cut in half.
            line = self.line_buffer[start:line_end].decode("utf-8")
            self._process_line(line, payloads)
            start = line_end + 1

        if start > 0:
            del self.line_buffer[:start]
        return payloads

    def flush(self) -> list[str]:
        """Recover whatever is still buffered once the transport has ended.

        An unterminated final line is processed as if it had a newline.  An
        unbalanced bare-JSON body is emitted as-is rather than dropped.
        """
        payloads: list[str] = []
        if self.line_buffer:
            payloads.extend(self.feed(b"\n"))

        if self.error_buffer:
            payloads.append(self.error_buffer)
            self.error_buffer = ""
            self.error_brace_balance = 0
        return payloads

    def _process_line(self, line: str, payloads: list[str]) -> None:
        if line.endswith("\r"):
            line = line[:-1]

        if not line:
            return

        if line.startswith(_DATA_PREFIX):
            payload = line[len(_DATA_PREFIX):]
            if payload.startswith(" "):
                payload = payload[1:]
            payloads.append(payload)
            return

        for char in line:
            if char == "{":
                self.error_brace_balance += 1
            elif char == "}":
                self.error_brace_balance -= 1
        self.error_buffer += line
        if self.error_buffer and self.error_brace_balance == 0:
            payloads.append(self.error_buffer)
            self.error_buffer = ""
