"""Capability Registry — registration, lookup, and resource matching.

Tests cover:
    - Demo registry holds add (tool) and greeting (resource)
    - Duplicate names rejected, across kinds
    - Unknown names and URIs raise UnknownCapabilityError
    - Resource templates must agree with their input shape
    - Listing preserves registration order
    - Category and version metadata, category queries, disabled capabilities skipped
"""

import pytest

from demo_server.core.domain_types import CapabilityKind, ParamType
from demo_server.core.errors import DuplicateCapabilityError, UnknownCapabilityError
from demo_server.services.capability_registry import CapabilityRegistry
from demo_server.services.handle_demo import AddHandler, GreetingHandler


def test_demo_registry_has_two_capabilities(registry):
    assert len(registry) == 2
    assert registry.names() == ["add", "greeting"]
    assert [d.name for d in registry.tools()] == ["add"]
    assert [d.name for d in registry.resource_templates()] == ["greeting"]


def test_lookup_returns_handler_and_shape(registry):
    descriptor = registry.lookup("add")
    assert descriptor.kind == CapabilityKind.TOOL
    assert dict(descriptor.input_shape) == {
        "a": ParamType.NUMBER, "b": ParamType.NUMBER,
    }
    assert isinstance(descriptor.handler, AddHandler)
    assert descriptor.uri_template is None
    assert descriptor.mime_type is None


def test_lookup_unknown_raises(registry):
    with pytest.raises(UnknownCapabilityError) as exc_info:
        registry.lookup("subtract")
    assert exc_info.value.name == "subtract"


def test_register_duplicate_raises():
    registry = CapabilityRegistry()
    registry.register("add", {"a": ParamType.NUMBER}, AddHandler())
    with pytest.raises(DuplicateCapabilityError):
        registry.register("add", {"b": ParamType.NUMBER}, AddHandler())
    assert len(registry) == 1


def test_duplicate_across_kinds_raises():
    registry = CapabilityRegistry()
    registry.register("greeting", {"name": ParamType.STRING}, GreetingHandler())
    with pytest.raises(DuplicateCapabilityError):
        registry.register(
            "greeting", {"name": ParamType.STRING}, GreetingHandler(),
            kind=CapabilityKind.RESOURCE, uri_template="greeting://{name}",
        )


def test_match_resource(registry):
    descriptor, params = registry.match_resource("greeting://World")
    assert descriptor.name == "greeting"
    assert params == {"name": "World"}


def test_match_resource_unknown_uri(registry):
    with pytest.raises(UnknownCapabilityError):
        registry.match_resource("farewell://World")


def test_resource_requires_template():
    registry = CapabilityRegistry()
    with pytest.raises(ValueError):
        registry.register(
            "greeting", {"name": ParamType.STRING}, GreetingHandler(),
            kind=CapabilityKind.RESOURCE,
        )


def test_resource_template_must_match_shape():
    registry = CapabilityRegistry()
    with pytest.raises(ValueError):
        registry.register(
            "greeting", {"name": ParamType.STRING}, GreetingHandler(),
            kind=CapabilityKind.RESOURCE, uri_template="greeting://{who}",
        )


def test_tool_cannot_declare_template():
    registry = CapabilityRegistry()
    with pytest.raises(ValueError):
        registry.register(
            "add", {"a": ParamType.NUMBER}, AddHandler(),
            uri_template="add://{a}",
        )


def test_input_shape_is_read_only(registry):
    with pytest.raises(TypeError):
        registry.lookup("add").input_shape["c"] = ParamType.NUMBER


def test_contains(registry):
    assert "add" in registry
    assert "subtract" not in registry


def test_demo_metadata(registry):
    add = registry.lookup("add")
    greeting = registry.lookup("greeting")
    assert (add.category, add.version) == ("math", "1.0.0")
    assert greeting.category == "text"


def test_categories_in_registration_order():
    registry = CapabilityRegistry()
    registry.register("b", {}, AddHandler(), category="math")
    registry.register("a", {}, AddHandler(), category="text")
    registry.register("c", {}, AddHandler(), category="math")
    registry.register("d", {}, AddHandler())
    assert registry.categories() == ["math", "text", "general"]
    assert [d.name for d in registry.by_category("math")] == ["b", "c"]
    assert registry.by_category("missing") == []


def test_disabled_capability_is_skipped():
    registry = CapabilityRegistry()
    assert registry.register("add", {}, AddHandler(), enabled=False) is None
    assert "add" not in registry
    with pytest.raises(UnknownCapabilityError):
        registry.lookup("add")
    # a disabled entry does not reserve the name
    registry.register("add", {}, AddHandler())
    assert len(registry) == 1


def test_build_registry_with_disabled_names():
    from demo_server.services.define_capabilities import build_registry

    registry = build_registry(disabled={"greeting"})
    assert registry.names() == ["add"]
    assert registry.resource_templates() == []
