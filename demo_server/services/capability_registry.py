"""Capability Registry — maps capability name to handler, input shape, and metadata.

Invariants:
    - Names are unique across tools and resources (DuplicateCapabilityError otherwise)
    - Descriptors are immutable once registered
    - lookup() and match_resource() raise UnknownCapabilityError, never return None
    - A resource template's variables equal its input shape's parameters
    - Listing order is registration order
    - Disabled capabilities are never stored: not listed, not dispatchable
    - categories() and by_category() return in registration order

Design Decisions:
    - Explicit register() calls, no decorators or auto-discovery: every capability
      visible in define_capabilities.py
    - Handler is a protocol with a single invoke() method: tools and resources
      share one dispatch path
    - Params model and JSON schema generated once at registration, not per request
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

from demo_server.core.domain_types import CapabilityKind, CapabilityName, ParamType
from demo_server.core.errors import DuplicateCapabilityError, UnknownCapabilityError
from demo_server.core.input_shape import ParamsModel, build_json_schema, build_params_model
from demo_server.core.uri_template import UriTemplate
from demo_server.schemas.capability import Request, Response

logger = logging.getLogger(__name__)


class CapabilityHandler(Protocol):
    """Produces the Response for one validated invocation."""

    async def invoke(self, params: ParamsModel, request: Request) -> Response: ...


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Everything the dispatcher needs to serve one capability."""
    name: CapabilityName
    kind: CapabilityKind
    input_shape: Mapping[str, ParamType]
    handler: CapabilityHandler
    params_model: type[ParamsModel]
    description: str = ""
    uri_template: UriTemplate | None = None
    mime_type: str | None = None
    input_schema: dict[str, Any] = field(default_factory=dict)
    category: str = "general"
    version: str = "1.0.0"


class CapabilityRegistry:
    """Name -> descriptor. Populated at startup, read-only afterwards."""

    def __init__(self):
        self._capabilities: dict[str, CapabilityDescriptor] = {}

    def register(
        self,
        name: str,
        input_shape: Mapping[str, ParamType],
        handler: CapabilityHandler,
        *,
        kind: CapabilityKind = CapabilityKind.TOOL,
        description: str = "",
        uri_template: str | None = None,
        mime_type: str | None = "text/plain",
        category: str = "general",
        version: str = "1.0.0",
        enabled: bool = True,
    ) -> CapabilityDescriptor | None:
        """Add a capability. Raises DuplicateCapabilityError if the name is taken.

        Returns None for a disabled capability, which is skipped entirely.
        """
        if not enabled:
            logger.debug(
                f"Skipping disabled capability '{name}'", extra={"capability": name},
            )
            return None
        if name in self._capabilities:
            raise DuplicateCapabilityError(name)

        shape = MappingProxyType(
            {param: ParamType(kind_) for param, kind_ in input_shape.items()}
        )
        template = None
        if kind == CapabilityKind.RESOURCE:
            template = _resource_template(name, uri_template, shape)
        elif uri_template is not None:
            raise ValueError(f"Tool '{name}' cannot declare a URI template")

        descriptor = CapabilityDescriptor(
            name=CapabilityName(name),
            kind=kind,
            input_shape=shape,
            handler=handler,
            params_model=build_params_model(name, shape),
            description=description,
            uri_template=template,
            mime_type=mime_type if kind == CapabilityKind.RESOURCE else None,
            input_schema=build_json_schema(shape),
            category=category,
            version=version,
        )
        self._capabilities[name] = descriptor
        logger.info(
            f"Registered {kind.value} '{name}' v{version} [{category}] - {description}",
            extra={"capability": name},
        )
        return descriptor

    def lookup(self, name: str) -> CapabilityDescriptor:
        """Descriptor for `name`. Raises UnknownCapabilityError."""
        descriptor = self._capabilities.get(name)
        if descriptor is None:
            raise UnknownCapabilityError(name)
        return descriptor

    def match_resource(self, uri: str) -> tuple[CapabilityDescriptor, dict[str, str]]:
        """First resource whose template matches `uri`, plus extracted params."""
        for descriptor in self.resource_templates():
            params = descriptor.uri_template.match(uri)
            if params is not None:
                return descriptor, params
        raise UnknownCapabilityError(uri)

    def tools(self) -> list[CapabilityDescriptor]:
        return self._of_kind(CapabilityKind.TOOL)

    def resource_templates(self) -> list[CapabilityDescriptor]:
        return self._of_kind(CapabilityKind.RESOURCE)

    def names(self) -> list[str]:
        return list(self._capabilities)

    def categories(self) -> list[str]:
        """Distinct categories, first-registered first."""
        return list(dict.fromkeys(d.category for d in self._capabilities.values()))

    def by_category(self, category: str) -> list[CapabilityDescriptor]:
        return [d for d in self._capabilities.values() if d.category == category]

    def _of_kind(self, kind: CapabilityKind) -> list[CapabilityDescriptor]:
        return [d for d in self._capabilities.values() if d.kind == kind]

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities

    def __len__(self) -> int:
        return len(self._capabilities)


def _resource_template(
    name: str, uri_template: str | None, shape: Mapping[str, ParamType],
) -> UriTemplate:
    if not uri_template:
        raise ValueError(f"Resource '{name}' requires a URI template")
    template = UriTemplate(uri_template)
    if set(template.variables) != set(shape):
        raise ValueError(
            f"Resource '{name}' template variables {template.variables} "
            f"do not match input shape {list(shape)}"
        )
    return template
