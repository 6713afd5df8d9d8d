"""Exception hierarchy for upstream, cache and aggregation failures."""


class EnergyApiError(Exception):
    """Base class for all errors raised by the energy API."""


class TransportError(EnergyApiError):
    """Upstream HTTP request failed (network error, timeout or non-2xx status)."""

    def __init__(
        self, url: str, message: str, *, status_code: int | None = None
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class InvalidUpstreamShapeError(EnergyApiError):
    """Upstream returned data that does not match the expected shape."""


class UpstreamFetchError(EnergyApiError):
    """A single-item fetch failed and the whole operation cannot proceed.

    Args:
        subject: What was being fetched, e.g. "block" or "blocks for date"
        identifier: Block hash, address or date the operation was about
        reason: Message of the underlying failure

    Attributes:
        identifier: Block hash, address or date the operation was about
        reason: Message of the underlying failure
    """

    def __init__(self, subject: str, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Failed to fetch {subject} {identifier}: {reason}")


class CacheUnavailableError(EnergyApiError):
    """The backing cache store could not be reached."""


__all__ = [
    "CacheUnavailableError",
    "EnergyApiError",
    "InvalidUpstreamShapeError",
    "TransportError",
    "UpstreamFetchError",
]
