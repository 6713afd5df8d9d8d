"""Common configuration constants used across the application."""

# Energy Model
ENERGY_COST_PER_BYTE = 4.56
"""Synthetic energy cost charged per byte of transaction or block data"""

# Upstream Provider
DEFAULT_BLOCKCHAIN_API_URL = "https://blockchain.info"
"""Base URL of the blockchain.info REST API"""

ADDRESS_PAGE_SIZE = 50
"""Maximum number of transactions the rawaddr endpoint returns per page"""

DEFAULT_BLOCK_PAGE_LIMIT = 50
"""Default number of block transactions returned per query"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

CONNECTION_TIMEOUT = 3.0
"""Timeout for establishing connections"""

MAX_KEEPALIVE_CONNECTIONS = 20
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 40
"""Maximum total number of connections"""

# Concurrency Limits
ADDRESS_PAGE_CONCURRENCY = 1
"""Address pages are fetched one at a time, in offset order"""

DAILY_TOTAL_CONCURRENCY = 5
"""Number of days whose totals are computed in parallel"""

BLOCK_ENERGY_CONCURRENCY = 20
"""Number of block lookups run in parallel when summing block energy"""

# Time
MILLIS_PER_DAY = 86_400_000
"""Milliseconds in one UTC day"""

# Cache
DEFAULT_REDIS_HOST = "127.0.0.1"
"""Redis host used when REDIS_HOST is not set"""

DEFAULT_REDIS_PORT = 6379
"""Redis port used when REDIS_PORT is not set"""

# API Server
DEFAULT_API_HOST = "0.0.0.0"  # noqa: S104
"""Interface the GraphQL server binds to"""

DEFAULT_API_PORT = 8000
"""Port the GraphQL server listens on"""


__all__ = [
    "ADDRESS_PAGE_CONCURRENCY",
    "ADDRESS_PAGE_SIZE",
    "BLOCK_ENERGY_CONCURRENCY",
    "CONNECTION_TIMEOUT",
    "DAILY_TOTAL_CONCURRENCY",
    "DEFAULT_API_HOST",
    "DEFAULT_API_PORT",
    "DEFAULT_BLOCKCHAIN_API_URL",
    "DEFAULT_BLOCK_PAGE_LIMIT",
    "DEFAULT_REDIS_HOST",
    "DEFAULT_REDIS_PORT",
    "DEFAULT_TIMEOUT",
    "ENERGY_COST_PER_BYTE",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MILLIS_PER_DAY",
]
