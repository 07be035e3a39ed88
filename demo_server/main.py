"""Demo Server — process entry point.

Invariants:
    - Capabilities registered explicitly before the transport starts
    - Exit code 0 on clean shutdown (stdin closed, Ctrl-C)
    - Exit code 1 with a diagnostic on stderr for startup or transport failure
    - stdout is never written to outside the protocol stream

Design Decisions:
    - main() returns the exit code instead of calling sys.exit: testable without
      SystemExit handling
    - Registry built here and handed to the dispatcher: no module-level server
"""

import asyncio
import logging

from demo_server.config import get_settings
from demo_server.core.errors import DemoServerError
from demo_server.infrastructure.mcp_transport import build_mcp_server, serve_stdio
from demo_server.infrastructure.observability import setup_logging
from demo_server.services.define_capabilities import build_registry
from demo_server.services.dispatch import Dispatcher

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    try:
        registry = build_registry(settings.disabled_capabilities)
    except DemoServerError as e:
        logger.critical(f"Startup failed: {e.message}", extra=e.to_log_extra())
        return 1

    server = build_mcp_server(Dispatcher(registry), settings)
    catalogue = "; ".join(
        f"{category}: {', '.join(d.name for d in registry.by_category(category))}"
        for category in registry.categories()
    )
    logger.info(
        f"{settings.server_name} {settings.server_version} starting "
        f"with capabilities: {catalogue or 'none'}",
    )

    try:
        asyncio.run(serve_stdio(server))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    except DemoServerError as e:
        logger.critical(e.message, extra=e.to_log_extra())
        return 1
    except Exception as e:
        logger.critical(f"Transport failed: {e}", exc_info=True)
        return 1

    logger.info("Client disconnected, shutting down")
    return 0
