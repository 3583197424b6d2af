"""
Adapters for integrating lightning strikes with other graph libraries.
"""

from .networkx_adapter import to_networkx_graph

__all__ = [
    "to_networkx_graph",
]
