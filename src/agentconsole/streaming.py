"""Incremental decoder for agent invocation streams.

:class:`StreamingParser` consumes the raw bytes of an invocation
response and reports text, tool-call lifecycle and message boundaries
to a :class:`~agentconsole.sink.StreamSink` while the bytes are still
arriving. Reads may split the stream anywhere: inside a UTF-8
sequence, a line, or a JSON value.

Per-message partial state lives in :class:`StreamingState`. Tool-call
arguments arrive as JSON text fragments and are re-parsed as they grow;
a failed parse there is the normal in-progress condition.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from typing import Any

from agentconsole.errors import MalformedToolInputError
from agentconsole.events import (
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    MessagePayload,
    MessageStart,
    MessageStop,
    StreamEvent,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    decode_events,
    decode_message,
)
from agentconsole.framing import LineFramer
from agentconsole.models import (
    MessageUpdate,
    ToolCall,
    ToolCallStatus,
    ToolCallUpdate,
)
from agentconsole.records import decode_record
from agentconsole.sink import StreamSink

logger = logging.getLogger(__name__)

_INCOMPLETE = object()


def _try_parse(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _INCOMPLETE


@dataclass
class StreamingState:
    """Accumulation state for the message currently being streamed."""

    message_id: str
    text: str = ""
    block_tool_ids: dict[int, str] = field(default_factory=dict)
    tool_inputs: dict[str, str] = field(default_factory=dict)
    seen_first_message: bool = False

    def start_cycle(self, message_id: str) -> None:
        """Retarget to a new message and drop all per-message state."""
        self.message_id = message_id
        self.text = ""
        self.block_tool_ids.clear()
        self.tool_inputs.clear()


class StreamingParser:
    """Decodes one invocation response stream into sink callbacks.

    Create one parser per response. Drive it with :meth:`parse_stream`
    for an async byte source, or with :meth:`feed` and :meth:`close`
    when the caller owns the read loop.

    Args:
        message_id: Id of the assistant message that receives the
            first cycle's text.
        sink: Callback target.
        strict_tool_input: When ``True``, unparseable tool-use input in
            a final assistant message raises
            :class:`~agentconsole.errors.MalformedToolInputError`. When
            ``False`` it is logged and reported as empty parameters.
    """

    def __init__(
        self,
        message_id: str,
        sink: StreamSink,
        strict_tool_input: bool = True,
    ):
        self.state = StreamingState(message_id=message_id)
        self.sink = sink
        self.strict_tool_input = strict_tool_input
        self.records_decoded = 0
        self.records_skipped = 0
        self._framer = LineFramer()

    @property
    def message_id(self) -> str:
        return self.state.message_id

    async def parse_stream(self, chunks: AsyncIterable[bytes]) -> None:
        """Consume ``chunks`` to exhaustion.

        Each chunk's records are fully handled before the next read.
        """
        async for chunk in chunks:
            self.feed(chunk)
        self.close()

    def parse_bytes(self, chunks: Iterable[bytes]) -> None:
        """Synchronous counterpart of :meth:`parse_stream`."""
        for chunk in chunks:
            self.feed(chunk)
        self.close()

    def feed(self, chunk: bytes) -> None:
        for line in self._framer.feed(chunk):
            self.parse_line(line)

    def close(self) -> None:
        self._framer.close()

    def parse_line(self, line: str) -> None:
        if not line.strip():
            return
        payload = decode_record(line)
        if payload is None:
            self.records_skipped += 1
            return
        self.records_decoded += 1
        self.handle_payload(payload)

    def handle_payload(self, payload: Any) -> None:
        """Route a decoded payload. Both branches are checked."""
        if not isinstance(payload, dict):
            return
        if payload.get("event"):
            for event in decode_events(payload["event"]):
                self._handle_event(event)
        if payload.get("message"):
            message = decode_message(payload["message"])
            if message is None:
                return
            if message.role == "assistant":
                self._handle_assistant_message(message)
            elif message.role == "user":
                self._handle_tool_result_message(message)

    # ------------------------------------------------------------------
    # Incremental events
    # ------------------------------------------------------------------

    def _handle_event(self, event: StreamEvent) -> None:
        if isinstance(event, MessageStart):
            self._on_message_start()
        elif isinstance(event, ContentBlockStart):
            self._on_block_start(event)
        elif isinstance(event, ContentBlockDelta):
            self._on_block_delta(event)
        elif isinstance(event, ContentBlockStop):
            self._on_block_stop(event)
        elif isinstance(event, MessageStop):
            self.sink.on_message_update(
                self.state.message_id, MessageUpdate(is_streaming=False),
            )

    def _on_message_start(self) -> None:
        state = self.state
        new_cycle = self.sink.on_new_message_cycle
        if state.seen_first_message and new_cycle is not None:
            new_id = new_cycle(state.message_id)
            if new_id:
                logger.debug(f"Message cycle rollover {state.message_id} -> {new_id}")
                state.start_cycle(new_id)
        state.seen_first_message = True

    def _on_block_start(self, event: ContentBlockStart) -> None:
        if event.tool_use is None:
            return
        state = self.state
        tool_use_id = event.tool_use.tool_use_id
        state.block_tool_ids[event.index] = tool_use_id
        state.tool_inputs[tool_use_id] = ""
        self.sink.on_tool_call_create(ToolCall(
            id=tool_use_id,
            tool_name=event.tool_use.name,
            parameters={},
            status=ToolCallStatus.PENDING,
            message_id=state.message_id,
        ))
        self.sink.on_tool_call_link_to_message(state.message_id, tool_use_id)

    def _on_block_delta(self, event: ContentBlockDelta) -> None:
        state = self.state
        if event.text is not None:
            state.text += event.text
            self.sink.on_text_update(state.message_id, state.text)

        if event.tool_use_input is None:
            return
        tool_use_id = state.block_tool_ids.get(event.index)
        if tool_use_id is None:
            return
        accumulated = state.tool_inputs.get(tool_use_id, "") + event.tool_use_input
        state.tool_inputs[tool_use_id] = accumulated
        parameters = _try_parse(accumulated)
        if parameters is not _INCOMPLETE:
            self.sink.on_tool_call_update(
                tool_use_id, ToolCallUpdate(parameters=parameters),
            )

    def _on_block_stop(self, event: ContentBlockStop) -> None:
        tool_use_id = self.state.block_tool_ids.get(event.index)
        if tool_use_id is None:
            return
        accumulated = self.state.tool_inputs.get(tool_use_id)
        if not accumulated:
            return
        parameters = _try_parse(accumulated)
        if parameters is _INCOMPLETE:
            # Authoritative parameters follow in the final message.
            update = ToolCallUpdate(status=ToolCallStatus.EXECUTING)
        else:
            update = ToolCallUpdate(
                parameters=parameters, status=ToolCallStatus.EXECUTING,
            )
        self.sink.on_tool_call_update(tool_use_id, update)

    # ------------------------------------------------------------------
    # Complete messages
    # ------------------------------------------------------------------

    def _handle_assistant_message(self, message: MessagePayload) -> None:
        state = self.state
        full_text = ""
        tool_call_ids: list[str] = []

        for block in message.blocks:
            if isinstance(block, TextBlock):
                full_text += block.text
            elif isinstance(block, ToolUseBlock):
                tool_call_ids.append(block.tool_use_id)
                self.sink.on_tool_call_update(block.tool_use_id, ToolCallUpdate(
                    tool_name=block.name,
                    parameters=self._final_parameters(block),
                    status=ToolCallStatus.EXECUTING,
                ))

        if full_text:
            state.text = full_text
            self.sink.on_text_update(state.message_id, full_text)
            self.sink.on_message_update(state.message_id, MessageUpdate(
                content=full_text, is_streaming=False, tool_calls=tool_call_ids,
            ))
        elif tool_call_ids:
            self.sink.on_message_update(state.message_id, MessageUpdate(
                is_streaming=False, tool_calls=tool_call_ids,
            ))

    def _final_parameters(self, block: ToolUseBlock) -> Any:
        if block.input is None:
            return {}
        if not isinstance(block.input, str):
            return block.input
        parameters = _try_parse(block.input)
        if parameters is not _INCOMPLETE:
            return parameters
        if self.strict_tool_input:
            raise MalformedToolInputError(block.tool_use_id, block.input)
        logger.warning(
            f"Unparseable input for tool call {block.tool_use_id}, "
            f"using empty parameters: {block.input!r}"
        )
        return {}

    def _handle_tool_result_message(self, message: MessagePayload) -> None:
        for block in message.blocks:
            if not isinstance(block, ToolResultBlock):
                continue
            value = block.value()
            if block.succeeded:
                self.sink.on_tool_result(block.tool_use_id, result=value)
            else:
                self.sink.on_tool_result(
                    block.tool_use_id, error=_stringify(value),
                )


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
