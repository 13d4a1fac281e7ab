"""Server bootstrap for the analogical reasoning MCP service.

Creates the FastMCP instance, builds the bounded session stores from the
environment, registers tools, and starts the periodic cleanup timer before
running the MCP server (stdio transport).
"""

from mcp.server.fastmcp import FastMCP

from config import load_settings
from core.log_config import configure_logging
from core.scheduler import CleanupScheduler
from sessions.analogies import build_manager

from tools.analogical_reasoning import register as register_analogical_reasoning
from tools.list_domains import register as register_list_domains
from tools.list_history import register as register_list_history
from tools.trigger_cleanup import register as register_trigger_cleanup

# Fails fast on non-positive bounds, before anything is registered.
settings = load_settings()
configure_logging(settings.log_level)

mcp = FastMCP("bounded-session-mcp")
manager = build_manager(settings)
scheduler = CleanupScheduler([manager], interval_seconds=settings.cleanup_interval_seconds)


def register_tools() -> None:
    register_analogical_reasoning(mcp, manager=manager)
    register_list_history(mcp, manager=manager)
    register_list_domains(mcp, manager=manager)
    register_trigger_cleanup(mcp, manager=manager)


register_tools()


def main() -> None:
    scheduler.start()
    try:
        mcp.run(transport="stdio")
    finally:
        scheduler.stop(timeout=5.0)


if __name__ == "__main__":
    main()
