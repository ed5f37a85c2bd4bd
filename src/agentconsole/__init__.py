from agentconsole.conversation import Conversation
from agentconsole.client import AgentClient
from agentconsole.config import ConsoleSettings
from agentconsole.errors import (
    AgentConsoleError,
    InvocationError,
    MalformedToolInputError,
)
from agentconsole.instrumentation import instrument, uninstrument
from agentconsole.models import (
    Message,
    MessageRole,
    MessageUpdate,
    ToolCall,
    ToolCallStatus,
    ToolCallUpdate,
)
from agentconsole.sink import StreamSink
from agentconsole.streaming import StreamingParser, StreamingState

__all__ = [
    "AgentClient",
    "AgentConsoleError",
    "ConsoleSettings",
    "Conversation",
    "InvocationError",
    "MalformedToolInputError",
    "Message",
    "MessageRole",
    "MessageUpdate",
    "StreamSink",
    "StreamingParser",
    "StreamingState",
    "ToolCall",
    "ToolCallStatus",
    "ToolCallUpdate",
    "instrument",
    "uninstrument",
]
