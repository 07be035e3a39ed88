"""Dispatch — routes each request to its handler and shapes the response.

Invariants:
    - Every request is validated against its capability's shape before invoke()
    - Per-request failures return an error Response (never raise)
    - Unexpected handler exceptions are logged with traceback, reported as INTERNAL_ERROR
    - Tool calls only reach tools; resource reads only reach resources
    - Registry injected at construction: no module-level server instance

Design Decisions:
    - One execute() path for both capability kinds; call_tool()/read_resource()
      only build the Request
    - Request ids from an itertools counter: monotonic within the process, used for logs
"""

import itertools
import logging

from demo_server.core.domain_types import CapabilityKind, RequestId
from demo_server.core.errors import (
    DemoServerError, ErrorContext, HandlerExecutionError, UnknownCapabilityError,
)
from demo_server.core.input_shape import validate_params
from demo_server.schemas.capability import Request, Response
from demo_server.services.capability_registry import CapabilityRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Resolve -> validate -> invoke, one request at a time per task."""

    def __init__(self, registry: CapabilityRegistry):
        self._registry = registry
        self._ids = itertools.count(1)

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    async def call_tool(self, name: str, arguments: dict | None) -> Response:
        """Invoke tool `name` with raw arguments."""
        request = Request(
            capability=name, params=arguments or {},
            request_id=RequestId(next(self._ids)),
        )
        return await self.execute(request, kind=CapabilityKind.TOOL)

    async def read_resource(self, uri: str) -> Response:
        """Read the resource addressed by `uri`."""
        request_id = RequestId(next(self._ids))
        try:
            descriptor, params = self._registry.match_resource(uri)
        except UnknownCapabilityError as e:
            e.context = ErrorContext(uri=uri, request_id=request_id)
            return self._error_response(e)
        request = Request(
            capability=descriptor.name, params=params, uri=uri,
            request_id=request_id,
        )
        return await self.execute(request, kind=CapabilityKind.RESOURCE)

    async def execute(
        self, request: Request, kind: CapabilityKind | None = None,
    ) -> Response:
        """Run one request. Returns an error Response on any per-request failure."""
        context = ErrorContext(
            capability=request.capability,
            request_id=request.request_id,
            uri=request.uri,
        )
        try:
            descriptor = self._registry.lookup(request.capability)
            if kind is not None and descriptor.kind != kind:
                raise UnknownCapabilityError(request.capability)
            params = validate_params(
                descriptor.name, descriptor.params_model, request.params, context,
            )
        except DemoServerError as e:
            e.context = context
            return self._error_response(e)

        try:
            response = await descriptor.handler.invoke(params, request)
        except DemoServerError as e:
            e.context = context
            return self._error_response(e)
        except Exception:
            logger.error(
                f"Handler '{request.capability}' raised",
                exc_info=True,
                extra={
                    "capability": request.capability,
                    "request_id": request.request_id,
                },
            )
            return self._error_response(
                HandlerExecutionError(request.capability, context),
            )

        logger.info(
            f"Dispatched '{request.capability}'",
            extra={
                "capability": request.capability,
                "request_id": request.request_id,
                "uri": request.uri,
            },
        )
        return response

    def _error_response(self, error: DemoServerError) -> Response:
        level = logging.WARNING if error.recoverable else logging.ERROR
        logger.log(
            level, f"{error.code}: {error.message}", extra=error.to_log_extra(),
        )
        return error.to_response()
