import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:8080/invocations"


class ConsoleSettings(BaseModel):
    """Connection and decoding settings for the console.

    Example:
        settings = ConsoleSettings.from_env()
        settings.save("~/.agentconsole.json")
    """

    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 600.0
    strict_tool_input: bool = True
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ConsoleSettings":
        values = {}
        if endpoint := os.getenv("AGENTCONSOLE_ENDPOINT"):
            values["endpoint"] = endpoint
        if timeout := os.getenv("AGENTCONSOLE_TIMEOUT"):
            values["timeout"] = timeout
        if strict := os.getenv("AGENTCONSOLE_STRICT_TOOL_INPUT"):
            values["strict_tool_input"] = strict
        return cls.model_validate(values)

    @classmethod
    def load(cls, path: str | Path) -> "ConsoleSettings":
        path = Path(path).expanduser()
        if not path.exists():
            logger.info(f"No settings at {path}, using defaults")
            return cls()
        return cls.model_validate_json(path.read_text())

    def save(self, path: str | Path) -> None:
        path = Path(path).expanduser()
        path.write_text(self.model_dump_json(indent=2))
