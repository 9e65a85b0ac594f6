"""
RedisGraph client, connection management, and reply parsing.

This package should contain ONLY Redis-specific logic:
- Connection/client setup
- GRAPH.* commands and the --compact wire format

Turning parsed result sets into caller-chosen Python values
belongs in the `shapes` module.
"""

from .client import RedisClient
from .graph import Graph
from .parser import parse_result_set

__all__ = [
    "RedisClient",
    "Graph",
    "parse_result_set",
]
