"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Enums serialize to their string values
    - ParamType maps one-to-one onto JSON-schema types
"""

from demo_server.core.domain_types import (
    CapabilityKind, CapabilityName, ContentType, ParamType, RequestId,
)


def test_identity_types_wrap_primitives():
    assert CapabilityName("add") == "add"
    assert RequestId(7) == 7


def test_capability_kind_has_two_kinds():
    assert {k.value for k in CapabilityKind} == {"tool", "resource"}


def test_param_type_json_types():
    assert ParamType.NUMBER.json_type == "number"
    assert ParamType.INTEGER.json_type == "integer"
    assert ParamType.STRING.json_type == "string"
    assert ParamType.BOOLEAN.json_type == "boolean"


def test_param_type_from_string():
    assert ParamType("number") is ParamType.NUMBER


def test_content_type_text_is_str_enum():
    assert ContentType.TEXT == "text"
