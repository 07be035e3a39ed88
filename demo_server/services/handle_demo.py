"""Demo Handlers — the `add` tool and the `greeting` resource.

Invariants:
    - Handlers receive validated params only (dispatcher validates first)
    - add returns exactly one text item: the decimal string of a + b
    - int + int is exact; any float operand makes the sum a float, and ints beyond
      float range count as +-Infinity
    - greeting returns exactly one resource body carrying the requested URI

Design Decisions:
    - One small class per capability implementing invoke(): no shared state
"""

import math

from demo_server.core.number_text import format_number
from demo_server.core.input_shape import ParamsModel
from demo_server.schemas.capability import Request, Response


class AddHandler:
    """a + b as text."""

    async def invoke(self, params: ParamsModel, request: Request) -> Response:
        return Response.text(format_number(add_numbers(params.a, params.b)))


def add_numbers(a: int | float, b: int | float) -> int | float:
    """Exact for two ints; otherwise float addition, huge ints saturating to +-inf."""
    if isinstance(a, int) and isinstance(b, int):
        return a + b
    return _as_float(a) + _as_float(b)


def _as_float(value: int | float) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


class GreetingHandler:
    """Templated greeting for `greeting://{name}`."""

    def __init__(self, template: str = "Hello, {name}!"):
        self.template = template

    async def invoke(self, params: ParamsModel, request: Request) -> Response:
        text = self.template.format(name=params.name)
        return Response.resource(request.uri or "", text)
