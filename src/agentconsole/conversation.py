"""In-memory conversation that applies parser callbacks."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from agentconsole.models import (
    Message,
    MessageRole,
    MessageUpdate,
    ToolCall,
    ToolCallStatus,
    ToolCallUpdate,
)
from agentconsole.sink import StreamSink

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return f"msg-{uuid.uuid4().hex[:12]}"


class Conversation(StreamSink):
    """Ordered messages and tool calls of one chat, updated in place.

    Tool calls referenced before they were created (for example a
    result for a call whose start event was never seen) are created on
    the fly so no update is lost.
    """

    def __init__(self) -> None:
        self.messages: dict[str, Message] = {}
        self.tool_calls: dict[str, ToolCall] = {}
        self._current_assistant_id: str | None = None

    def append_message(
        self,
        role: MessageRole,
        content: str = "",
        is_streaming: bool = False,
    ) -> Message:
        message = Message(
            id=_new_id(), role=role, content=content, is_streaming=is_streaming,
        )
        self.messages[message.id] = message
        if role == MessageRole.ASSISTANT:
            self._current_assistant_id = message.id
        return message

    def clear(self) -> None:
        self.messages.clear()
        self.tool_calls.clear()
        self._current_assistant_id = None

    def tool_calls_for(self, message_id: str) -> list[ToolCall]:
        message = self.messages[message_id]
        return [self.tool_calls[i] for i in message.tool_calls if i in self.tool_calls]

    # ------------------------------------------------------------------
    # StreamSink
    # ------------------------------------------------------------------

    def on_text_update(self, message_id: str, content: str) -> None:
        message = self.messages.get(message_id)
        if message is not None:
            message.content = content

    def on_new_message_cycle(self, previous_message_id: str) -> str:
        message = self.append_message(MessageRole.ASSISTANT, is_streaming=True)
        logger.debug(f"New assistant message {message.id} after {previous_message_id}")
        return message.id

    def on_tool_call_create(self, tool_call: ToolCall) -> None:
        self.tool_calls[tool_call.id] = tool_call

    def on_tool_call_update(self, tool_call_id: str, update: ToolCallUpdate) -> None:
        fields = update.changes()
        existing = self.tool_calls.get(tool_call_id)
        if existing is not None:
            self.tool_calls[tool_call_id] = existing.model_copy(update=fields)
            return
        if fields.get("parameters") is None:
            fields.pop("parameters", None)
        self.tool_calls[tool_call_id] = ToolCall(
            id=tool_call_id,
            tool_name=fields.pop("tool_name", None) or "",
            status=fields.pop("status", None) or ToolCallStatus.EXECUTING,
            message_id=self._current_assistant_id or "",
            **fields,
        )

    def on_tool_call_link_to_message(self, message_id: str, tool_call_id: str) -> None:
        message = self.messages.get(message_id)
        if message is not None:
            message.tool_calls.append(tool_call_id)

    def on_message_update(self, message_id: str, update: MessageUpdate) -> None:
        message = self.messages.get(message_id)
        if message is None:
            return
        fields = update.changes()
        new_ids = fields.pop("tool_calls", None) or []
        for tool_call_id in new_ids:
            if tool_call_id not in message.tool_calls:
                message.tool_calls.append(tool_call_id)
        for name, value in fields.items():
            setattr(message, name, value)

    def on_tool_result(
        self,
        tool_call_id: str,
        result: Any = None,
        error: str | None = None,
    ) -> None:
        status = ToolCallStatus.ERROR if error is not None else ToolCallStatus.COMPLETED
        existing = self.tool_calls.get(tool_call_id)
        if existing is None:
            logger.debug(f"Result for unknown tool call {tool_call_id}")
            self.tool_calls[tool_call_id] = ToolCall(
                id=tool_call_id,
                tool_name="unknown",
                status=status,
                result=result,
                error=error,
                message_id=self._current_assistant_id or "",
            )
            return
        self.tool_calls[tool_call_id] = existing.model_copy(update={
            "status": status, "result": result, "error": error,
        })
