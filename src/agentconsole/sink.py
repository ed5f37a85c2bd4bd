"""Callbacks the streaming parser reports into."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from agentconsole.models import MessageUpdate, ToolCall, ToolCallUpdate


class StreamSink:
    """Receives everything the parser reconstructs from a stream.

    Subclass and override the callbacks you need; the defaults do
    nothing. Calls are synchronous and made in event arrival order.

    ``on_new_message_cycle`` is optional. Leave it as ``None`` to keep
    all cycles in the first message, or override it with a method
    that takes the previous message id and returns the id of a freshly
    created streaming message.
    """

    on_new_message_cycle: Callable[[str], str | None] | None = None

    def on_text_update(self, message_id: str, content: str) -> None:
        """``content`` is always the full accumulated text, never a diff."""

    def on_tool_call_create(self, tool_call: ToolCall) -> None:
        pass

    def on_tool_call_update(self, tool_call_id: str, update: ToolCallUpdate) -> None:
        pass

    def on_tool_call_link_to_message(self, message_id: str, tool_call_id: str) -> None:
        pass

    def on_message_update(self, message_id: str, update: MessageUpdate) -> None:
        pass

    def on_tool_result(
        self,
        tool_call_id: str,
        result: Any = None,
        error: str | None = None,
    ) -> None:
        """Exactly one of ``result`` and ``error`` is meaningful."""
