"""Define Capabilities — the server's tool and resource surface, registered explicitly.

Invariants:
    - Every capability appears in build_registry(): no auto-discovery
    - Input shapes declared here are the only source of validation rules
    - Resource templates are not enumerable (resources/list stays empty)
    - A name in `disabled` is skipped, never registered

Design Decisions:
    - Shapes and descriptions as module constants, registration in one function
    - build_registry() returns a fresh registry per call: tests and the entry point
      never share state
"""

from collections.abc import Collection

from demo_server.core.domain_types import CapabilityKind, ParamType
from demo_server.services.capability_registry import CapabilityRegistry
from demo_server.services.handle_demo import AddHandler, GreetingHandler


ADD_SHAPE = {"a": ParamType.NUMBER, "b": ParamType.NUMBER}
ADD_DESCRIPTION = "Add two numbers and return the sum as text."

GREETING_SHAPE = {"name": ParamType.STRING}
GREETING_TEMPLATE = "greeting://{name}"
GREETING_DESCRIPTION = "A personalised greeting for the name in the URI."


def build_registry(disabled: Collection[str] = ()) -> CapabilityRegistry:
    """Registry holding `add` and `greeting`, minus any disabled names."""
    registry = CapabilityRegistry()
    registry.register(
        "add", ADD_SHAPE, AddHandler(),
        description=ADD_DESCRIPTION,
        category="math",
        enabled="add" not in disabled,
    )
    registry.register(
        "greeting", GREETING_SHAPE, GreetingHandler(),
        kind=CapabilityKind.RESOURCE,
        description=GREETING_DESCRIPTION,
        uri_template=GREETING_TEMPLATE,
        category="text",
        enabled="greeting" not in disabled,
    )
    return registry
