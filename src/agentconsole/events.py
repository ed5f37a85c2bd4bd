"""Typed views of the decoded wire payloads.

Payloads are structural unions: a variant is recognised by which field
is present, not by a tag. Decoding is defensive. A missing or
mistyped field means "not this variant" and is never an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class StreamEvent:
    """Base for all incremental events."""


@dataclass
class MessageStart(StreamEvent):
    """The agent began a new assistant message."""


@dataclass
class ToolUseStart:
    tool_use_id: str
    name: str


@dataclass
class ContentBlockStart(StreamEvent):
    index: int
    tool_use: ToolUseStart | None = None


@dataclass
class ContentBlockDelta(StreamEvent):
    """A text and/or tool-input fragment for one content block.

    Both kinds may arrive on the same delta.
    """

    index: int
    text: str | None = None
    tool_use_input: str | None = None


@dataclass
class ContentBlockStop(StreamEvent):
    index: int


@dataclass
class MessageStop(StreamEvent):
    pass


@dataclass
class ContentBlock:
    """Base for blocks of a complete message."""


@dataclass
class TextBlock(ContentBlock):
    text: str = ""


@dataclass
class ToolUseBlock(ContentBlock):
    tool_use_id: str = ""
    name: str = ""
    input: Any = None


@dataclass
class ToolResultBlock(ContentBlock):
    tool_use_id: str = ""
    status: str | None = None
    content: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    def value(self) -> Any:
        """First content item's text if it has one, else the raw content."""
        if isinstance(self.content, list) and self.content:
            first = self.content[0]
            if isinstance(first, dict) and first.get("text"):
                return first["text"]
        return self.content


@dataclass
class MessagePayload:
    """A complete message replayed by the agent after streaming."""

    role: str
    blocks: list[ContentBlock] = field(default_factory=list)


def _object(value: Any) -> dict | None:
    return value if isinstance(value, dict) else None


def _index(obj: dict) -> int | None:
    value = obj.get("contentBlockIndex")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def decode_events(event: Any) -> list[StreamEvent]:
    """Decode the ``event`` field of a payload.

    ``messageStart`` stands alone; the remaining kinds are checked
    independently and returned in a fixed order.
    """
    event = _object(event)
    if event is None:
        return []
    if _object(event.get("messageStart")) is not None:
        return [MessageStart()]

    events: list[StreamEvent] = []

    start = _object(event.get("contentBlockStart"))
    if start is not None and "start" in start and _index(start) is not None:
        tool_use = _object((_object(start["start"]) or {}).get("toolUse"))
        events.append(ContentBlockStart(
            index=_index(start),
            tool_use=_tool_use_start(tool_use) if tool_use else None,
        ))

    delta_event = _object(event.get("contentBlockDelta"))
    if (
        delta_event is not None
        and _index(delta_event) is not None
        and _object(delta_event.get("delta")) is not None
    ):
        delta = delta_event["delta"]
        text = delta.get("text")
        tool_input = (_object(delta.get("toolUse")) or {}).get("input")
        events.append(ContentBlockDelta(
            index=_index(delta_event),
            text=text if isinstance(text, str) else None,
            tool_use_input=tool_input if isinstance(tool_input, str) else None,
        ))

    stop = _object(event.get("contentBlockStop"))
    if stop is not None and _index(stop) is not None:
        events.append(ContentBlockStop(index=_index(stop)))

    if _object(event.get("messageStop")) is not None:
        events.append(MessageStop())

    return events


def _tool_use_start(tool_use: dict) -> ToolUseStart | None:
    tool_use_id = tool_use.get("toolUseId")
    if not isinstance(tool_use_id, str) or not tool_use_id:
        return None
    return ToolUseStart(tool_use_id=tool_use_id, name=str(tool_use.get("name", "")))


def decode_content_blocks(content: Any) -> list[ContentBlock]:
    """Flatten a message's content array into typed blocks, in order."""
    blocks: list[ContentBlock] = []
    if not isinstance(content, list):
        return blocks
    for raw in content:
        raw = _object(raw)
        if raw is None:
            continue
        text = raw.get("text")
        if isinstance(text, str) and text:
            blocks.append(TextBlock(text=text))
        tool_use = _object(raw.get("toolUse"))
        if tool_use and isinstance(tool_use.get("toolUseId"), str):
            blocks.append(ToolUseBlock(
                tool_use_id=tool_use["toolUseId"],
                name=str(tool_use.get("name", "")),
                input=tool_use.get("input"),
            ))
        tool_result = _object(raw.get("toolResult"))
        if tool_result and isinstance(tool_result.get("toolUseId"), str):
            blocks.append(ToolResultBlock(
                tool_use_id=tool_result["toolUseId"],
                status=tool_result.get("status"),
                content=tool_result.get("content"),
            ))
    return blocks


def decode_message(message: Any) -> MessagePayload | None:
    """Decode the ``message`` field of a payload.

    Returns ``None`` unless the message has a role and a content array.
    """
    message = _object(message)
    if message is None:
        return None
    role = message.get("role")
    content = message.get("content")
    if not isinstance(role, str) or not isinstance(content, list):
        return None
    return MessagePayload(role=role, blocks=decode_content_blocks(content))
