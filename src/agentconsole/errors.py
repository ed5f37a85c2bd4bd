"""Exceptions raised by agentconsole.

Record-level decode problems are never raised; they are expected while a
stream is still arriving and are only logged.
"""


class AgentConsoleError(Exception):
    """Base class for all agentconsole errors."""


class MalformedToolInputError(AgentConsoleError, ValueError):
    """A final assistant message carried tool-use input that is not JSON.

    The final message claims to be complete, so unlike a streamed
    fragment this cannot be retried.
    """

    def __init__(self, tool_call_id: str, raw_input: str):
        super().__init__(
            f"Tool call {tool_call_id} has unparseable input: {raw_input!r}"
        )
        self.tool_call_id = tool_call_id
        self.raw_input = raw_input


class InvocationError(AgentConsoleError):
    """The agent endpoint could not be invoked successfully."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
