"""FastAPI application serving the GraphQL energy API."""

from __future__ import annotations

from contextlib import asynccontextmanager

from typing import TYPE_CHECKING, Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
from strawberry.fastapi import GraphQLRouter

from src.api.schema import schema
from src.data.aggregator import EnergyAggregator
from src.data.cache import CacheClient
from src.data.upstream import BlockchainClient
from src.helpers.config import get_api_bind, get_redis_settings
from src.helpers.http import create_http_client
from src.helpers.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import AsyncIterator


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the HTTP client, cache client and aggregator for the app's lifetime."""
    cache = await CacheClient.connect(get_redis_settings())
    if not cache.available:
        logger.warning("Redis unavailable, serving without cache")

    async with create_http_client() as client:
        app.state.aggregator = EnergyAggregator(BlockchainClient(client), cache)
        try:
            yield
        finally:
            await cache.close()


async def get_context(request: Request) -> dict[str, Any]:
    """GraphQL context carrying the request's aggregator."""
    return {"aggregator": request.app.state.aggregator}


def create_app() -> FastAPI:
    """Create the FastAPI application.

    GraphQL is served at /graphql and Prometheus metrics at /metrics.
    """
    app = FastAPI(title="Blockchain Energy API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        GraphQLRouter(schema, context_getter=get_context), prefix="/graphql"
    )
    app.mount("/metrics", make_asgi_app())
    return app


app = create_app()


def main() -> None:
    """Serve the API with uvicorn."""
    host, port = get_api_bind()
    uvicorn.run("src.api.server:app", host=host, port=port)


if __name__ == "__main__":
    main()
