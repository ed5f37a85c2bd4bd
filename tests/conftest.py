import pytest

from agentconsole.models import MessageUpdate, ToolCall, ToolCallUpdate
from agentconsole.sink import StreamSink


# ---------------------------------------------------------------------------
# Recording sinks
# ---------------------------------------------------------------------------

class RecordingSink(StreamSink):
    """Sink that records every callback as a tuple. No rollover support."""

    def __init__(self):
        self.calls: list[tuple] = []

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def of(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def on_text_update(self, message_id: str, content: str) -> None:
        self.calls.append(("text", message_id, content))

    def on_tool_call_create(self, tool_call: ToolCall) -> None:
        self.calls.append(("create", tool_call))

    def on_tool_call_update(self, tool_call_id: str, update: ToolCallUpdate) -> None:
        self.calls.append(("update", tool_call_id, update.changes()))

    def on_tool_call_link_to_message(self, message_id: str, tool_call_id: str) -> None:
        self.calls.append(("link", message_id, tool_call_id))

    def on_message_update(self, message_id: str, update: MessageUpdate) -> None:
        self.calls.append(("message", message_id, update.changes()))

    def on_tool_result(self, tool_call_id, result=None, error=None) -> None:
        self.calls.append(("result", tool_call_id, result, error))


class CyclingSink(RecordingSink):
    """Recording sink that allocates ``msg-2``, ``msg-3``... on rollover."""

    def __init__(self):
        super().__init__()
        self._next = 2

    def on_new_message_cycle(self, previous_message_id: str) -> str:
        self.calls.append(("cycle", previous_message_id))
        new_id = f"msg-{self._next}"
        self._next += 1
        return new_id


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def cycling_sink():
    return CyclingSink()
