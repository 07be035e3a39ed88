"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CapabilityName and RequestId wrap primitives: never pass bare str/int as ids
    - Every declared parameter type maps to exactly one JSON-schema type
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (MCP payloads are JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CapabilityName = NewType("CapabilityName", str)
RequestId = NewType("RequestId", int)


# ─── Enums ───────────────────────────────────────────────────────

class CapabilityKind(str, Enum):
    """How a capability is addressed: by tool name or by resource URI."""
    TOOL = "tool"
    RESOURCE = "resource"


class ParamType(str, Enum):
    """Primitive parameter types an input shape may declare."""
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"

    @property
    def json_type(self) -> str:
        """JSON-schema `type` keyword for this parameter type."""
        return self.value


class ContentType(str, Enum):
    """Content item types carried in a tool response."""
    TEXT = "text"
