"""Tagged result type shared by every tool handler."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Mapping

__all__ = ["ErrorKind", "ResponsePayload", "ToolResponse"]

ErrorKind = Literal["not_found", "format_unavailable", "unknown_tool", "invalid_arguments"]
ResponsePayload = Mapping[str, Any] | str


@dataclass(slots=True, frozen=True)
class ToolResponse:
    """
    Either ``ok`` with a payload or ``error`` with a human-readable message.

    Build instances through :meth:`ok` and :meth:`error`; the two variants never
    share fields, so callers branch on :attr:`is_error` only.
    """

    status: Literal["success", "error"]
    payload: ResponsePayload | None = None
    message: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, payload: ResponsePayload) -> "ToolResponse":
        return cls(status="success", payload=payload)

    @classmethod
    def error(cls, message: str, *, kind: ErrorKind) -> "ToolResponse":
        return cls(status="error", message=message, kind=kind)

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    def to_text(self) -> str:
        """Render the text content sent back to the caller."""

        if self.is_error:
            return self.message or ""
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload, indent=2, ensure_ascii=False)
