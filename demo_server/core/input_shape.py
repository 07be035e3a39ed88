"""Input Shape — declared parameter shapes turned into validators and JSON schemas.

Invariants:
    - Every declared parameter is required; none has a default
    - No coercion: "3" is not a number, True is not a number, NaN/Infinity are rejected
    - Undeclared parameters are dropped, never passed to a handler
    - validate_params() raises ShapeValidationError only, never pydantic.ValidationError

Design Decisions:
    - pydantic create_model over hand-written checks: validation is delegated to the
      schema library, this module only maps ParamType -> field type
    - JSON schema built from ParamType directly, not model_json_schema(): the
      advertised schema stays {"type": "number"} instead of an anyOf of int/float
"""

from collections.abc import Mapping
from typing import Annotated, Any, Union

from pydantic import (
    BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr,
    ValidationError, create_model,
)
from pydantic.types import AllowInfNan, Strict

from demo_server.core.domain_types import ParamType
from demo_server.core.errors import ErrorContext, ShapeValidationError


# int kept as int so integer sums stay exact; floats must be finite
Number = Union[StrictInt, Annotated[float, Strict(), AllowInfNan(False)]]

_FIELD_TYPES: dict[ParamType, Any] = {
    ParamType.NUMBER: Number,
    ParamType.INTEGER: StrictInt,
    ParamType.STRING: StrictStr,
    ParamType.BOOLEAN: StrictBool,
}


class ParamsModel(BaseModel):
    """Base for generated parameter models."""
    model_config = ConfigDict(extra="ignore", frozen=True)


def build_params_model(
    name: str, shape: Mapping[str, ParamType],
) -> type[ParamsModel]:
    """Generate a frozen pydantic model with one required field per parameter."""
    fields = {
        param: (_FIELD_TYPES[ParamType(kind)], ...)
        for param, kind in shape.items()
    }
    model_name = "".join(part.capitalize() for part in name.split("_")) + "Params"
    return create_model(model_name, __base__=ParamsModel, **fields)


def build_json_schema(shape: Mapping[str, ParamType]) -> dict[str, Any]:
    """JSON schema advertised for the shape (tools/list inputSchema)."""
    return {
        "type": "object",
        "properties": {
            param: {"type": ParamType(kind).json_type}
            for param, kind in shape.items()
        },
        "required": list(shape),
    }


def validate_params(
    capability: str,
    model: type[ParamsModel],
    params: Mapping[str, Any] | None,
    context: ErrorContext | None = None,
) -> ParamsModel:
    """Validate raw params against the model. Raises ShapeValidationError."""
    try:
        return model.model_validate(dict(params or {}))
    except ValidationError as exc:
        raise ShapeValidationError(
            capability, _error_details(exc), context,
        ) from exc


def _error_details(exc: ValidationError) -> list[dict[str, str]]:
    """One entry per offending field. Union branches collapse to a single entry."""
    details: list[dict[str, str]] = []
    seen: set[str] = set()
    for err in exc.errors():
        loc = err["loc"]
        field = str(loc[0]) if loc else "__root__"
        if field in seen:
            continue
        seen.add(field)
        details.append({
            "field": field,
            "message": err["msg"],
            "type": err["type"],
        })
    return details
