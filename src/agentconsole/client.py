"""HTTP caller that streams an agent invocation into a conversation."""

from __future__ import annotations

import logging

import httpx

from agentconsole.config import ConsoleSettings
from agentconsole.conversation import Conversation
from agentconsole.errors import InvocationError
from agentconsole.instrumentation import (
    invocation_span,
    record_error,
    record_stream_stats,
)
from agentconsole.models import Message, MessageRole
from agentconsole.streaming import StreamingParser

logger = logging.getLogger(__name__)


class AgentClient:
    """Sends prompts to an agent invocation endpoint.

    The response body is decoded while it arrives; the conversation is
    updated as each record is handled.

    Args:
        settings: Endpoint, timeout and decoding options.
        http_client: Optional pre-configured client. It is not closed
            by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: ConsoleSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or ConsoleSettings()
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.timeout,
        )

    async def __aenter__(self) -> "AgentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def send(self, prompt: str, conversation: Conversation) -> Message:
        """Invoke the agent with ``prompt`` and stream the reply.

        Returns the assistant message created for the reply. Later
        message cycles are appended to ``conversation`` as new messages.

        Raises:
            InvocationError: The endpoint could not be reached or
                answered with an error status.
            MalformedToolInputError: A final message carried tool input
                that is not JSON and the settings are strict.
        """
        conversation.append_message(MessageRole.USER, prompt)
        assistant = conversation.append_message(
            MessageRole.ASSISTANT, is_streaming=True,
        )
        parser = StreamingParser(
            assistant.id, conversation,
            strict_tool_input=self.settings.strict_tool_input,
        )

        async with invocation_span(self.settings.endpoint) as span:
            try:
                await self._stream(prompt, parser)
            except Exception as e:
                logger.error(f"Streaming error: {e}")
                record_error(span, e)
                assistant.content = assistant.content or f"Error: {e}"
                assistant.is_streaming = False
                raise
            finally:
                record_stream_stats(span, parser)

        assistant.is_streaming = False
        return assistant

    async def _stream(self, prompt: str, parser: StreamingParser) -> None:
        try:
            async with self.http_client.stream(
                "POST",
                self.settings.endpoint,
                json={"prompt": prompt},
                headers=self.settings.headers,
            ) as response:
                if response.is_error:
                    raise InvocationError(
                        f"HTTP error! status: {response.status_code}",
                        status_code=response.status_code,
                    )
                await parser.parse_stream(response.aiter_bytes())
        except httpx.HTTPError as e:
            raise InvocationError(f"{type(e).__name__}: {e}") from e
