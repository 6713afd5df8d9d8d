"""blockchain.info REST client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from src.data.models import RawAddress, RawBlock
from src.helpers.config import get_blockchain_api_url
from src.helpers.errors import InvalidUpstreamShapeError
from src.helpers.http import fetch_json
from src.helpers.logging import get_logger
from src.helpers.metrics import UPSTREAM_REQUESTS


if TYPE_CHECKING:
    import httpx

    from src.helpers.http import JsonResponse


logger = get_logger(__name__)


class BlockchainClient:
    """Client for the three blockchain.info endpoints the aggregator uses.

    No retries are performed: a failed request raises ``TransportError``
    and it is up to the caller to propagate or swallow it.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str | None = None) -> None:
        """Initialize upstream client.

        Args:
            client: Shared HTTP client
            base_url: API base URL (defaults to BLOCKCHAIN_API_URL or blockchain.info)
        """
        self.client = client
        self.base_url = get_blockchain_api_url(base_url)

    async def _get(
        self, endpoint: str, path: str, params: dict[str, Any] | None = None
    ) -> JsonResponse:
        UPSTREAM_REQUESTS.labels(endpoint=endpoint).inc()
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s %s", url, params or "")
        return await fetch_json(self.client, url, params=params)

    async def raw_block(self, block_hash: str) -> RawBlock:
        """Fetch a block with its transactions.

        Raises:
            TransportError: If the request fails
            InvalidUpstreamShapeError: If the payload is not a block
        """
        data = await self._get("rawblock", f"rawblock/{block_hash}")
        try:
            return RawBlock.model_validate(data)
        except ValidationError as e:
            msg = f"Unexpected rawblock payload for {block_hash}: {e.error_count()} errors"
            raise InvalidUpstreamShapeError(msg) from e

    async def raw_address(self, address: str, offset: int, limit: int) -> RawAddress:
        """Fetch one page of an address's transactions.

        Raises:
            TransportError: If the request fails
            InvalidUpstreamShapeError: If the payload is not an address page
        """
        data = await self._get(
            "rawaddr",
            f"rawaddr/{address}",
            params={"offset": offset, "limit": limit},
        )
        try:
            return RawAddress.model_validate(data)
        except ValidationError as e:
            msg = f"Unexpected rawaddr payload for {address}: {e.error_count()} errors"
            raise InvalidUpstreamShapeError(msg) from e

    async def blocks_for_date(self, epoch_millis: int) -> JsonResponse:
        """Fetch the blocks mined on the day starting at ``epoch_millis``.

        The payload is returned untouched: a list of ``{hash, ...}`` objects
        on success, or whatever error shape upstream chose to send.

        Raises:
            TransportError: If the request fails
        """
        return await self._get(
            "blocks", f"blocks/{epoch_millis}", params={"format": "json"}
        )


__all__ = ["BlockchainClient"]
