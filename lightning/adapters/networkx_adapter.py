"""
Adapter for converting lightning strikes to networkx graphs.
"""

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from ..core.strike import LightningStrike


def to_networkx_graph(strike: "LightningStrike") -> nx.DiGraph:
    """
    Convert a strike into a directed parent -> child graph.

    Each segment becomes a node keyed by its index, carrying the segment's
    scalar properties and endpoints as attributes. Edges point from a
    segment to the segments extending it.

    Parameters
    ----------
    strike : LightningStrike
        Strike to convert

    Returns
    -------
    nx.DiGraph
        Tree rooted at segment 0 (empty graph for an empty strike)

    Examples
    --------
    >>> G = to_networkx_graph(strike)
    >>> nx.is_arborescence(G)
    True
    """
    G = nx.DiGraph()
    G.graph.update(strike.metadata)

    for seg in strike:
        G.add_node(
            seg.index,
            start=tuple(seg.start.tolist()),
            end=tuple(seg.end.tolist()),
            length=seg.length,
            diameter=seg.diameter,
            min_diameter=seg.min_diameter,
            pressure=seg.pressure,
            temperature=seg.temperature,
            branch_index=seg.branch_index,
            has_ended=seg.has_ended,
        )

    for seg in strike:
        if seg.parent_index is not None:
            G.add_edge(
                seg.parent_index,
                seg.index,
                new_branch=strike[seg.parent_index].branch_index != seg.branch_index,
            )

    return G


__all__ = ["to_networkx_graph"]
