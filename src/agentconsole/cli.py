"""Command line entry point: ``agentconsole send`` and ``agentconsole replay``."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from agentconsole.client import AgentClient
from agentconsole.config import ConsoleSettings
from agentconsole.conversation import Conversation
from agentconsole.errors import AgentConsoleError
from agentconsole.models import MessageRole
from agentconsole.streaming import StreamingParser

logger = logging.getLogger(__name__)

REPLAY_CHUNK_SIZE = 64


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s:%(name)s:%(levelname)s:%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def format_conversation(conversation: Conversation) -> str:
    lines = []
    for message in conversation.messages.values():
        lines.append(f"[{message.role.value}] {message.content}")
        for tc in conversation.tool_calls_for(message.id):
            lines.append(
                f"  -> {tc.tool_name}({json.dumps(tc.parameters)}) "
                f"[{tc.status.value}]"
            )
            if tc.error is not None:
                lines.append(f"     error: {tc.error}")
            elif tc.result is not None:
                lines.append(f"     result: {tc.result}")
    return "\n".join(lines)


def replay(path: Path, conversation: Conversation, strict: bool = True) -> None:
    """Decode a captured stream file in small chunks."""
    assistant = conversation.append_message(MessageRole.ASSISTANT, is_streaming=True)
    parser = StreamingParser(assistant.id, conversation, strict_tool_input=strict)
    data = path.read_bytes()
    parser.parse_bytes(
        data[i:i + REPLAY_CHUNK_SIZE]
        for i in range(0, len(data), REPLAY_CHUNK_SIZE)
    )
    assistant.is_streaming = False
    logger.info(
        f"Replayed {parser.records_decoded} records, "
        f"skipped {parser.records_skipped}"
    )


async def _send(prompt: str, settings: ConsoleSettings, conversation: Conversation):
    async with AgentClient(settings) as client:
        await client.send(prompt, conversation)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentconsole",
        description="Stream a conversation from an agent invocation endpoint.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="Invoke the agent with a prompt.")
    send.add_argument("prompt")
    send.add_argument("--endpoint", help="Overrides the configured endpoint.")
    send.add_argument("--settings", type=Path, help="Settings JSON file.")

    rep = sub.add_parser("replay", help="Decode a captured stream file.")
    rep.add_argument("file", type=Path)
    rep.add_argument(
        "--lenient", action="store_true",
        help="Report unparseable final tool input as empty parameters.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    conversation = Conversation()

    try:
        if args.command == "send":
            if args.settings:
                settings = ConsoleSettings.load(args.settings)
            else:
                settings = ConsoleSettings.from_env()
            if args.endpoint:
                settings.endpoint = args.endpoint
            asyncio.run(_send(args.prompt, settings, conversation))
        else:
            replay(args.file, conversation, strict=not args.lenient)
    except AgentConsoleError as e:
        print(format_conversation(conversation))
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_conversation(conversation))
    return 0


if __name__ == "__main__":
    sys.exit(main())
