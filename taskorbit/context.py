"""Application context shared by the tools of one server instance."""

from dataclasses import dataclass
from typing import Any

from taskorbit.config import Settings
from taskorbit.storage import BlobStore, JsonDirectoryBlobStore, MemoryBlobStore
from taskorbit.store import DataStore


@dataclass
class AppContext:
    """Everything a tool needs: the settings it was built from and the data store."""

    settings: Settings
    store: DataStore


def build_backend(settings: Settings) -> BlobStore:
    if settings.data_dir is None:
        return MemoryBlobStore()
    return JsonDirectoryBlobStore(settings.data_dir)


def build_context(settings: Settings) -> AppContext:
    """Construct the context once at startup."""
    store = DataStore(build_backend(settings), seed_samples=settings.seed_samples)
    return AppContext(settings=settings, store=store)


def context_from_request(ctx: Any) -> AppContext:
    """Pull the AppContext yielded by the server lifespan out of an MCP request context."""
    return ctx.request_context.lifespan_context
