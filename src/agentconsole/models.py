import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer


class MessageRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ToolCallStatus(Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ERROR = "error"


class Message(BaseModel):
    id: str
    role: MessageRole
    content: str = ""
    timestamp: float = Field(default_factory=time.time)
    tool_calls: list[str] = Field(default_factory=list)
    is_streaming: bool = False

    @field_serializer("role")
    def serialize_role(self, role: MessageRole, _info) -> str:
        return role.value


class ToolCall(BaseModel):
    id: str
    tool_name: str
    parameters: Any = Field(default_factory=dict)
    status: ToolCallStatus = ToolCallStatus.PENDING
    result: Any = None
    error: str | None = None
    timestamp: float = Field(default_factory=time.time)
    message_id: str

    @field_serializer("status")
    def serialize_status(self, status: ToolCallStatus, _info) -> str:
        return status.value


class ToolCallUpdate(BaseModel):
    """Partial tool-call fields. Only explicitly set fields are an update.

    ``parameters`` may legitimately be ``None`` (a JSON ``null``), so
    consumers must read ``model_fields_set`` rather than test for ``None``.
    """

    tool_name: str | None = None
    parameters: Any = None
    status: ToolCallStatus | None = None

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class MessageUpdate(BaseModel):
    """Partial message fields, read the same way as :class:`ToolCallUpdate`."""

    content: str | None = None
    is_streaming: bool | None = None
    tool_calls: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}
