"""FastMCP server initialization for TaskOrbit."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from taskorbit.config import load_settings
from taskorbit.context import AppContext, build_context


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Build the application context once per server run."""
    yield build_context(load_settings())


# Initialize the MCP server
mcp = FastMCP("taskorbit", lifespan=app_lifespan)


def run() -> None:
    """Run the MCP server."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Importing the package registers every tool with the server
    import taskorbit.tools  # noqa: F401

    mcp.run()
