"""Capability Schemas — Pydantic models for one request/response cycle.

Invariants:
    - Request and Response are transient: one per invocation, never shared
    - Tool output lives in `content`; resource output lives in `contents`
    - An error Response always carries is_error=True, an error_code and one text item

Design Decisions:
    - One Response model for both capability kinds: the dispatcher stays kind-agnostic,
      the MCP binding picks the field that matches the protocol method
    - Field names follow the wire shape ({content:[{type,text}]}, {contents:[{uri,text}]})
"""

from typing import Any

from pydantic import BaseModel, Field

from demo_server.core.domain_types import ContentType, RequestId


class TextContent(BaseModel):
    """One ordered text item of a tool response."""
    type: ContentType = ContentType.TEXT
    text: str


class ResourceContents(BaseModel):
    """Text body of a read resource, addressed by its URI."""
    uri: str
    text: str
    mime_type: str | None = "text/plain"


class Request(BaseModel):
    """A single capability invocation."""
    capability: str
    params: dict[str, Any] = Field(default_factory=dict)
    uri: str | None = None
    request_id: RequestId | None = None


class Response(BaseModel):
    """Result of a capability invocation."""
    content: list[TextContent] = Field(default_factory=list)
    contents: list[ResourceContents] = Field(default_factory=list)
    is_error: bool = False
    error_code: str | None = None

    @classmethod
    def text(cls, text: str) -> "Response":
        """Single text item response (tool output)."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def resource(
        cls, uri: str, text: str, mime_type: str | None = "text/plain",
    ) -> "Response":
        """Single resource body response (resource output)."""
        return cls(contents=[ResourceContents(uri=uri, text=text, mime_type=mime_type)])

    def first_text(self) -> str:
        """Text of the first content item, tool or resource."""
        if self.content:
            return self.content[0].text
        if self.contents:
            return self.contents[0].text
        return ""
